"""
Stateless request/response handlers: payments and crew assignment.

Neither keeps records nor looks anything up in the stores.
"""
import math

from .exceptions import ValidationError
from .logger import get_logger
from .models import check_positive

log = get_logger(__name__)


def handle_payment(method: str, amount: float) -> bool:
    if not isinstance(method, str) or not method.strip():
        log.warning("payment_rejected", reason="blank method")
        return False
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
        log.warning("payment_rejected", reason="amount must be positive", amount=amount)
        return False
    log.info("payment_completed", method=method.strip(), amount=round(float(amount), 2))
    return True


def assign_crew(crew_name: str, flight_id: int) -> bool:
    # the flight ID is not checked against the flight store
    if not isinstance(crew_name, str) or not crew_name.strip():
        log.warning("crew_assignment_rejected", reason="blank crew name")
        return False
    try:
        check_positive(flight_id, "Flight ID")
    except ValidationError as e:
        log.warning("crew_assignment_rejected", reason=e.message, flight_id=flight_id)
        return False
    log.info("crew_assigned", crew=crew_name.strip(), flight_id=flight_id)
    return True
