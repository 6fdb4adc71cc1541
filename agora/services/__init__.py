"""
High-level use cases for the Agora API.

Each service orchestrates the JSON storage to implement business rules
(create a post, cast a vote, add a milestone, etc.). Routers call these
services instead of manipulating the data file directly, and pass in an
already resolved Caller instead of letting services read headers.
"""
