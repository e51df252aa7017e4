"""
Design Faults.
"""

from archmarket.faults import FaultDomain, InvalidArgumentFault, NotFoundFault

DESIGNS_DOMAIN = FaultDomain("designs", "Design catalogue faults")


class DesignNotFoundFault(NotFoundFault):
    domain = DESIGNS_DOMAIN
    code = "DESIGN_NOT_FOUND"

    def __init__(self, design_id: str):
        super().__init__("Design not found", metadata={"design_id": design_id})


class AlreadyFavoritedFault(InvalidArgumentFault):
    domain = DESIGNS_DOMAIN
    code = "ALREADY_FAVORITED"
    default_message = "Design already in favorites"
