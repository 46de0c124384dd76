"""Utility for resolving society names to IDs."""

from societybooks.domain.society import SocietyService


def resolve_society(society_service: SocietyService, society: str | int) -> int:
    """Resolve society name or ID to society ID.

    Args:
        society_service: SocietyService instance
        society: Society name (str) or ID (int or string representation of int)

    Returns:
        Society ID

    Raises:
        ValueError: If the society is not found or the name is ambiguous
    """
    if isinstance(society, int):
        if society_service.get_society(society) is None:
            raise ValueError(f"Society ID {society} not found")
        return society

    try:
        society_id = int(society)
    except (ValueError, TypeError):
        society_id = None
    if society_id is not None:
        if society_service.get_society(society_id) is None:
            raise ValueError(f"Society ID {society_id} not found")
        return society_id

    matches = [s for s in society_service.list_societies() if s.name == society]
    if len(matches) > 1:
        raise ValueError(f"Several societies are named '{society}', use the ID instead")
    if matches:
        return matches[0].id

    raise ValueError(f"Society '{society}' not found")
