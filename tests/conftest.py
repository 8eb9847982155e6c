"""Shared fixtures for gql-tsgen tests."""

import pytest

from gql_tsgen.core.parser import parse_sdl
from gql_tsgen.core.type_emitter import TypeEmitter


PRODUCT_SCHEMA = '''
scalar DateTime

"""Publication state of a news item"""
enum NewsState {
  draft
  published
}

enum ProductStatus {
  stable
  beta
  retired
}

enum ProductCategory {
  hardware
  software
}

interface Node {
  id: ID!
}

type User implements Node {
  id: ID!
  email: String!
  name: String
  createdAt: DateTime
}

type Product implements Node {
  id: ID!
  name: String!
  price: Float
  status: ProductStatus!
  categories: [ProductCategory!]
  owner: User
}

type News implements Node {
  id: ID!
  title: String!
  state: NewsState!
}

type Token {
  token: String!
  user: User!
}

type NewsStatistics {
  total: Int!
  published: Int!
}

union SearchResult = Product | News

input PriceRangeInput {
  min: Float
  max: Float
}

input ProductCreateInput {
  name: String!
  status: ProductStatus!
  price: Float
  categories: [ProductCategory!]
  priceRange: PriceRangeInput
}

input ProductUpdateInput {
  name: String
  status: ProductStatus
}

type Query {
  "The signed-in user"
  me: User
  user(id: ID!): User
  products(status: ProductStatus, first: Int = 20): [Product!]!
  product(id: ID!): Product
  search(term: String!): [SearchResult!]!
  newsStatistics: NewsStatistics!
  productCount(status: ProductStatus): Int!
}

type Mutation {
  login(email: String!, password: String!): Token!
  createProduct(data: ProductCreateInput!): Product!
  updateProduct(id: ID!, data: ProductUpdateInput!): Product
  logout: Boolean!
}
'''


@pytest.fixture
def product_schema():
    """IR for the product catalogue schema."""
    return parse_sdl(PRODUCT_SCHEMA)


@pytest.fixture
def registry(product_schema):
    """Type registry built from the product schema."""
    return TypeEmitter(product_schema).build_registry()


@pytest.fixture
def product_sdl():
    """SDL text of the product catalogue schema."""
    return PRODUCT_SCHEMA
