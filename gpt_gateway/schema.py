from ariadne import QueryType, make_executable_schema

from gpt_gateway.resolvers import resolve_ask_openai, resolve_chat

type_defs = """
  type Query {
    chat(message: String!): ChatResponse!
    askOpenAI(prompt: String!, model: String): OpenAIResponse!
  }

  type ChatResponse {
    text: String!
  }

  type OpenAIResponse {
    text: String!
    usage: UsageInfo!
    metadata: MetadataInfo!
  }

  type UsageInfo {
    promptTokens: Int!
    completionTokens: Int!
    totalTokens: Int!
  }

  type MetadataInfo {
    model: String!
    finishReason: String!
  }
"""

query = QueryType()
query.set_field("chat", resolve_chat)
query.set_field("askOpenAI", resolve_ask_openai)

# Built once at import and shared read-only by every request.
# convert_names_case maps camelCase fields onto the snake_case result models.
schema = make_executable_schema(type_defs, query, convert_names_case=True)
