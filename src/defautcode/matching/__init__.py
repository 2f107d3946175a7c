"""Module de recherche et scoring des codes défaut."""

from defautcode.matching.engine import DefautSearchEngine, rank_matches, search
from defautcode.matching.schema import SearchMatch, SearchOutcome, TicketRow

__all__ = ["DefautSearchEngine", "SearchMatch", "SearchOutcome", "TicketRow", "rank_matches", "search"]
