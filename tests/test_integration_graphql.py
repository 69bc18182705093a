import pytest
import sqlalchemy as sa

import graphql
from graphql import graphql_sync

import cursorable
from cursorable import define_pagination
from cursorable.integration.graphql import graphql_relay_schema, connection_type_defs, CONNECTION_ARGUMENTS
from cursorable.integration.graphql import relay_query, relay_request, selected_field_names
from cursorable.testing import created_tables, insert, ExpectedQueryCounter

from .util.models import Base, Post, POST_SORT_KEYS, posts


# language=graphql
GQL_SCHEMA = graphql_relay_schema + connection_type_defs('Post', 'Post') + f'''
type Post {{
    id: Int!
    title: String!
    author: String
}}

type Query {{
    posts({CONNECTION_ARGUMENTS}): PostConnection!
}}
'''


def test_relay_query(connection: sa.engine.Connection, schema: graphql.GraphQLSchema):
    """ Test: Relay connection field, page after page """
    with created_tables(connection, Base):
        insert(connection, Post, *posts(5))

        # language=graphql
        query = '''
        query ($first: Int, $after: String) {
            posts(first: $first, after: $after) {
                edges { node { id } cursor }
                pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
            }
        }
        '''

        # Page 1
        data = graphql_query_sync(schema, query, {'first': 2}, connection=connection)
        edges = data['posts']['edges']
        page_info = data['posts']['pageInfo']
        assert [edge['node']['id'] for edge in edges] == [5, 4]
        assert page_info['hasNextPage'] is True
        assert page_info['hasPreviousPage'] is False
        assert page_info['startCursor'] == edges[0]['cursor']
        assert page_info['endCursor'] == edges[-1]['cursor']

        # Page 2
        data = graphql_query_sync(schema, query, {'first': 2, 'after': page_info['endCursor']}, connection=connection)
        assert [edge['node']['id'] for edge in data['posts']['edges']] == [3, 2]
        assert data['posts']['pageInfo']['hasPreviousPage'] is True

        # Backward, another sort key
        # language=graphql
        query = '''
        query {
            posts(last: 2, sortKey: "oldest") {
                nodes { id title }
                pageInfo { hasNextPage hasPreviousPage }
            }
        }
        '''
        data = graphql_query_sync(schema, query, connection=connection)
        assert data['posts'] == {
            'nodes': [{'id': 4, 'title': 'post-4'}, {'id': 5, 'title': 'post-5'}],
            'pageInfo': {'hasNextPage': False, 'hasPreviousPage': True},
        }


def test_relay_total_count(connection: sa.engine.Connection, schema: graphql.GraphQLSchema):
    """ Test: totalCount is only counted when selected """
    with created_tables(connection, Base):
        insert(connection, Post, *posts(5))

        # Not selected: one query
        with ExpectedQueryCounter(connection, 1, 'totalCount not selected'):
            data = graphql_query_sync(schema, 'query { posts(first: 1) { nodes { id } } }', connection=connection)
        assert data['posts'] == {'nodes': [{'id': 5}]}

        # Selected: two queries
        with ExpectedQueryCounter(connection, 2, 'totalCount selected'):
            data = graphql_query_sync(schema, 'query { posts(first: 1) { totalCount } }', connection=connection)
        assert data['posts'] == {'totalCount': 5}

        # Selected in a fragment
        # language=graphql
        query = '''
        query { posts(first: 1) { ...PostConnectionFields } }
        fragment PostConnectionFields on PostConnection { nodes { id } totalCount }
        '''
        data = graphql_query_sync(schema, query, connection=connection)
        assert data['posts'] == {'nodes': [{'id': 5}], 'totalCount': 5}


def test_relay_errors(connection: sa.engine.Connection, schema: graphql.GraphQLSchema):
    """ Test: pagination errors are reported as GraphQL errors """
    with created_tables(connection, Base):
        res = graphql_sync(schema, 'query { posts(sortKey: "popular") { nodes { id } } }', context_value={'connection': connection})
        assert res.errors
        assert 'popular' in res.errors[0].message

        res = graphql_sync(schema, 'query { posts(after: "garbage") { nodes { id } } }', context_value={'connection': connection})
        assert res.errors
        assert 'Invalid cursor' in res.errors[0].message


@pytest.mark.parametrize(('query', 'expected_names'), [
    ('query { posts { nodes { id } pageInfo { hasNextPage } } }', ['nodes', 'pageInfo']),
    ('query { posts { all: nodes { id } totalCount } }', ['nodes', 'totalCount']),
    ('query { posts { ... on PostConnection { edges { cursor } } totalCount } }', ['edges', 'totalCount']),
])
def test_selected_field_names(schema: graphql.GraphQLSchema, query: str, expected_names: list[str]):
    """ Test: selected field names """
    selected = []

    def resolve_posts(root, info: graphql.GraphQLResolveInfo, **args):
        selected.extend(selected_field_names(info.fragments, info.field_nodes[0].selection_set))
        return None

    schema.query_type.fields['posts'].resolve = resolve_posts
    graphql_sync(schema, query)
    assert selected == expected_names


def test_relay_request():
    """ Test: Relay arguments become pagination requests """
    assert relay_request(first=10) == cursorable.Forward(first=10)
    assert relay_request(last=5, before='WzFd', sortKey='oldest') == cursorable.Backward(last=5, before='WzFd', sort_key='oldest')
    assert relay_request() == cursorable.Forward()


def graphql_query_sync(schema: graphql.GraphQLSchema, query: str, variables: dict = None, *, connection: sa.engine.Connection) -> dict:
    """ Make a GraphQL query, fail on errors """
    res = graphql_sync(schema, query, variable_values=variables, context_value={'connection': connection})
    if res.errors:
        raise res.errors[0]
    return res.data  # type: ignore[return-value]


@pytest.fixture()
def schema() -> graphql.GraphQLSchema:
    engine = define_pagination(Post, POST_SORT_KEYS)

    def resolve_posts(root, info: graphql.GraphQLResolveInfo, **args):
        return relay_query(engine, info.context['connection'], info, **args)

    schema = graphql.build_schema(GQL_SCHEMA)
    schema.query_type.fields['posts'].resolve = resolve_posts  # type: ignore[union-attr]
    return schema
