"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from decimal import Decimal, ROUND_HALF_UP


def format_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Format a successful API response."""
    response: Dict[str, Any] = {"success": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    return response


def format_error(message: str) -> Dict[str, Any]:
    """Format error response."""
    return {
        "success": False,
        "error": message
    }


def round_money(value: Any) -> int:
    """Round a money amount half-up to a whole currency unit."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
