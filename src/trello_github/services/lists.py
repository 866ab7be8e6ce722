"""Checks that configured list ids point at open lists on the board."""

from trello_github.services.trello_client import TrelloClient
from trello_github.utils.ids import is_valid_id
from trello_github.utils.logging import get_logger

logger = get_logger('lists')


def list_exists(trello: TrelloClient, list_id: str) -> bool:
    """Check whether a list id is one of the board's open lists.

    Fails closed: a malformed id, a failed lookup or an unknown (or closed)
    list all return False.

    Args:
        trello: Trello client bound to the configured board.
        list_id: List id to check.

    Returns:
        True if an open list on the board has this id.
    """
    if not is_valid_id(list_id):
        logger.debug("List id %r does not match the Trello id pattern", list_id)
        return False

    result = trello.get_board_lists()
    if not result.ok:
        logger.error("Could not fetch lists of board %s: %s", trello.board_id, result.error)
        return False

    exists = any(
        board_list.get('id') == list_id and not board_list.get('closed')
        for board_list in result.data or []
    )
    if not exists:
        logger.debug("List %s is not an open list on board %s", list_id, trello.board_id)
    return exists
