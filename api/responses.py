"""
Standardized API response helpers.
Provides consistent response formatting across all endpoints.
"""

from typing import Any, Dict, List, Optional


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    """Create a standardized success response"""
    payload: Dict[str, Any] = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return payload


def list_response(items: List[Any]) -> dict:
    """Create a standardized response for an unpaginated list"""
    return {"success": True, "count": len(items), "data": items}


def paginated_response(result: Dict[str, Any]) -> dict:
    """Create a standardized paginated response from a service listing result"""
    return {
        "success": True,
        "count": len(result["items"]),
        "total": result["total"],
        "pagination": {
            "page": result["page"],
            "limit": result["limit"],
            "pages": result["pages"],
        },
        "data": result["items"],
    }
