"""GitHub collaborators: GraphQL client and webhook event naming."""

from opsbot.github.client import GitHubClient
from opsbot.github.events import event_type_from_delivery

__all__ = ["GitHubClient", "event_type_from_delivery"]
