from typing import List, Optional, Sequence


def has_active_query(query: Optional[str]) -> bool:
    return bool(query and query.strip())


def filter_peer_ids(peer_ids: Sequence[str], query: Optional[str]) -> List[str]:
    """Case-insensitive substring match that keeps the input order.

    A blank query is no filter at all.
    """
    if not has_active_query(query):
        return list(peer_ids)
    needle = query.lower()
    return [peer_id for peer_id in peer_ids if needle in peer_id.lower()]
