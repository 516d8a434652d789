from datetime import datetime, timezone
from typing import List, Dict, Any, Optional
import re
import secrets
import string

def get_utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)

def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime to ISO format, passing None through"""
    return dt.isoformat() if dt else None

def paginate_results(items: List[Any], page: int = 1, page_size: int = 10) -> Dict[str, Any]:
    """
    Paginate a list of items
    
    Args:
        items: List of items to paginate
        page: Page number (1-based)
        page_size: Number of items per page
        
    Returns:
        Dict containing paginated results and metadata
    """
    page = max(page, 1)
    start = (page - 1) * page_size
    end = start + page_size
    
    total_items = len(items)
    total_pages = (total_items + page_size - 1) // page_size
    
    return {
        "items": items[start:end],
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "page_size": page_size,
            "total_items": total_items
        }
    }

def generate_password(length: int = 10) -> str:
    """Random password made of letters and digits"""
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))

def slugify_username(name: str) -> str:
    """
    Build a login-safe username from a display name
    
    Args:
        name: Team or person name
        
    Returns:
        Lowercase username with a short random suffix
    """
    base = re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_") or "team"
    return f"{base[:24]}_{secrets.token_hex(2)}"
