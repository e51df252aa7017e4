"""
Custom design-service request model.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..shared.enums import TextChoices

CUSTOM_REQUESTS = "custom_requests"


class RequestCategory(TextChoices):
    RESIDENTIAL = "residential", "Residential"
    COMMERCIAL = "commercial", "Commercial"
    LANDSCAPE = "landscape", "Landscape"
    INTERIOR = "interior", "Interior"
    URBAN_PLANNING = "urban-planning", "Urban planning"
    SUSTAINABLE = "sustainable", "Sustainable"
    RENOVATION = "renovation", "Renovation"
    NEW_CONSTRUCTION = "new-construction", "New construction"


class ProjectType(TextChoices):
    CONCEPT_DESIGN = "concept-design", "Concept design"
    DETAILED_DESIGN = "detailed-design", "Detailed design"
    CONSTRUCTION_DOCUMENTS = "construction-documents", "Construction documents"
    VISUALIZATION_3D = "3d-visualization", "3D visualization"
    MASTER_PLANNING = "master-planning", "Master planning"
    INTERIOR_DESIGN = "interior-design", "Interior design"


class RequestStatus(TextChoices):
    SUBMITTED = "submitted", "Submitted"
    REVIEWING = "reviewing", "Reviewing"
    QUOTED = "quoted", "Quoted"
    ACCEPTED = "accepted", "Accepted"
    IN_PROGRESS = "in-progress", "In progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class Priority(TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    URGENT = "urgent", "Urgent"


def visible_communications(request: Dict[str, Any], *, include_internal: bool) -> List[Dict[str, Any]]:
    messages = request.get("communications", [])
    if include_internal:
        return messages
    return [m for m in messages if not m.get("isInternal")]
