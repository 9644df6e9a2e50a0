from setuptools import setup, find_namespace_packages

with open("requirements.txt", "r") as f:
    requirements = f.read().splitlines()

setup(
    name="gpt_gateway",
    version="1.0",
    packages=find_namespace_packages(include=["gpt_gateway", "gpt_gateway.*"]),
    install_requires=requirements,
    extras_require={"test": ["pytest>=8", "pytest-asyncio>=0.23"]},
)
