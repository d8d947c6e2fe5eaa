"""
VOD Orders Engine — Event Types
================================
Audit trail of order commands. Payloads are plain dicts built
from the aggregate after the operation succeeded.
"""

# ── Event Types ───────────────────────────────────────────────

ORDER_CREATED_V1 = "order.order.created.v1"
ORDER_COMPLETED_V1 = "order.order.completed.v1"
ORDER_CANCELED_V1 = "order.order.canceled.v1"
ORDER_LINE_CANCELED_V1 = "order.line.canceled.v1"
ORDER_REWARD_CONVERTED_V1 = "order.reward.converted.v1"
ORDER_COMMAND_REJECTED_V1 = "order.command.rejected.v1"


# ── Payload Builders ──────────────────────────────────────────

def _base_fields(order, occurred_at):
    return {
        "order_id": order.order_id,
        "member_id": getattr(order.member, "member_id", None),
        "status": order.status.value,
        "remain_refund_amount": order.remain_refund_amount,
        "remain_refund_reward": order.remain_refund_reward,
        "occurred_at": occurred_at.isoformat(),
    }


def _order_created(order, occurred_at, **_):
    base = _base_fields(order, occurred_at)
    base.update({
        "total_pay_amount": order.total_pay_amount,
        "reward_applied": order.reward_applied,
        "line_prices": [line.price for line in order.lines],
    })
    return base


def _order_completed(order, occurred_at, **_):
    base = _base_fields(order, occurred_at)
    base.update({
        "payment_key": order.payment_key,
        "completed_at": order.completed_at.isoformat() if order.completed_at else None,
    })
    return base


def _order_canceled(order, occurred_at, refund, **_):
    base = _base_fields(order, occurred_at)
    base.update(refund.to_dict())
    return base


def _line_canceled(order, occurred_at, refund, line, **_):
    base = _base_fields(order, occurred_at)
    base.update(refund.to_dict())
    base["line_price"] = line.price
    return base


def _reward_converted(order, occurred_at, refund, amount, **_):
    base = _base_fields(order, occurred_at)
    base.update({
        "converted": amount,
        "from_remain_reward": refund.refund_reward,
        "from_remain_amount": refund.refund_amount,
    })
    return base


PAYLOAD_BUILDERS = {
    ORDER_CREATED_V1: _order_created,
    ORDER_COMPLETED_V1: _order_completed,
    ORDER_CANCELED_V1: _order_canceled,
    ORDER_LINE_CANCELED_V1: _line_canceled,
    ORDER_REWARD_CONVERTED_V1: _reward_converted,
}


def build_payload(event_type: str, order, occurred_at, **extra) -> dict:
    builder = PAYLOAD_BUILDERS.get(event_type)
    if builder is None:
        raise ValueError(f"No payload builder for: {event_type}")
    return builder(order, occurred_at, **extra)


def build_rejection_payload(command_name: str, reason, occurred_at, order=None) -> dict:
    return {
        "command": command_name,
        "order_id": order.order_id if order is not None else None,
        "reason": reason.to_dict(),
        "occurred_at": occurred_at.isoformat(),
    }
