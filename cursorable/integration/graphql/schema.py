import os.path

# Load GraphQL definitions from the file
pwd = os.path.dirname(__file__)

# Get this schema
with open(os.path.join(pwd, './relay.graphql'), 'rt') as f:
    graphql_relay_schema = f.read()


def connection_type_defs(name: str, node_type: str) -> str:
    """ Generate GraphQL type definitions for a Relay connection of `node_type`

    Example:
        connection_type_defs('User', 'User')
        =>
            type UserConnection { edges: [UserEdge!]! nodes: [User!]! pageInfo: PageInfo! totalCount: Int }
            type UserEdge { node: User! cursor: String! }
    """
    return (
        f'type {name}Connection {{\n'
        f'    edges: [{name}Edge!]!\n'
        f'    nodes: [{node_type}!]!\n'
        f'    pageInfo: PageInfo!\n'
        f'    totalCount: Int\n'
        f'}}\n'
        f'\n'
        f'type {name}Edge {{\n'
        f'    node: {node_type}!\n'
        f'    cursor: String!\n'
        f'}}\n'
    )


# Arguments for a paginated field
# Example:
#   "type Query { users(" + CONNECTION_ARGUMENTS + "): UserConnection! }"
CONNECTION_ARGUMENTS = 'first: Int, after: String, last: Int, before: String, sortKey: String'
