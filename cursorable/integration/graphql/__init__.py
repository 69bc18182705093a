""" Integration with GraphQL: graphql-core """

# High-level APIs
from .relay import relay_query, relay_query_async, relay_request, relay_connection
from .relay import ConnectionDict, EdgeDict
from .schema import graphql_relay_schema, connection_type_defs, CONNECTION_ARGUMENTS

# Lower-level APIs
from .selection import selected_field_names, selected_field_names_from_info
