# tests/test_order_status.py
import pytest

from streetfood_connect.middleware.exceptions import InvalidStatusTransition
from streetfood_connect.services import order_status


@pytest.mark.parametrize("current,requested", [
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "in_transit"),
    ("confirmed", "cancelled"),
    ("in_transit", "delivered"),
    ("in_transit", "cancelled"),
])
def test_allowed_transitions(current, requested):
    assert order_status.validate_transition(current, requested) == requested


@pytest.mark.parametrize("current,requested", [
    ("pending", "delivered"),
    ("pending", "in_transit"),
    ("pending", "pending"),
    ("confirmed", "pending"),
    ("delivered", "cancelled"),
    ("cancelled", "confirmed"),
    ("unknown", "confirmed"),
    ("pending", "shipped"),
])
def test_rejected_transitions(current, requested):
    with pytest.raises(InvalidStatusTransition) as exc:
        order_status.validate_transition(current, requested)
    assert exc.value.status_code == 409
    assert exc.value.current == current


def test_terminal_states():
    assert order_status.is_terminal("delivered")
    assert order_status.is_terminal("cancelled")
    assert not order_status.is_terminal("pending")


def test_accept_and_reject_targets():
    assert order_status.ACCEPT == "confirmed"
    assert order_status.REJECT == "cancelled"


def test_labels():
    assert order_status.status_label("in_transit") == "In Transit"
    assert order_status.status_label("pending") == "Pending"
    assert order_status.status_label("lost") == "Unknown"
    assert order_status.status_label(None) == "Unknown"
