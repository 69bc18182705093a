""" Get the list of fields selected with a GraphQL query """

import graphql

from collections import abc


def selected_field_names_from_info(info: graphql.GraphQLResolveInfo) -> abc.Iterator[str]:
    """ Shortcut: selected_field_names() when used in a resolve function

    Example:
        def resolve_users(obj, info):
            names = set(selected_field_names_from_info(info))
    """
    assert len(info.field_nodes) == 1  # I've never seen a selection of > 1 field
    field_node = info.field_nodes[0]

    return selected_field_names(info.fragments, field_node.selection_set)  # type: ignore[arg-type]


def selected_field_names(fragments: dict[str, graphql.FragmentDefinitionNode], selection_set: graphql.SelectionSetNode) -> abc.Iterator[str]:
    """ Get the list of field names that are selected at the current level. Does not include nested names.

    Supports:
    * fields
    * sub-queries (only returns the name)
    * fragment spreads (`... fragmentName`) and inline fragments (`... on Type { }`): their fields are merged in

    Does not support:
    * Directives. All fields are included.

    Example:
        With a query like this:
            query {
                users { edges { cursor } pageInfo { hasNextPage } totalCount }
            }
        the `users` field would give:
            ['edges', 'pageInfo', 'totalCount']
    """
    assert isinstance(selection_set, graphql.SelectionSetNode)

    for node in selection_set.selections:
        # Field
        if isinstance(node, graphql.FieldNode):
            # NOTE: in case of an alias, it still returns the actual field name, not the alias!
            yield node.name.value
        # Fragment spread (`... fragmentName`)
        elif isinstance(node, graphql.FragmentSpreadNode):
            yield from selected_field_names(fragments, fragments[node.name.value].selection_set)
        # Inline fragment (`... on Droid { }`)
        elif isinstance(node, graphql.InlineFragmentNode):
            yield from selected_field_names(fragments, node.selection_set)
        # Something new
        else:
            raise NotImplementedError(str(type(node)))
