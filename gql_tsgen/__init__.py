"""gql-tsgen: GraphQL to TypeScript client generator."""

__version__ = "0.1.0"
