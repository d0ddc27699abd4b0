from flask import Blueprint, current_app, jsonify, request

from ...schemas.claim import ClaimCreateSchema, ClaimFilterSchema, ClaimReviewSchema
from ...security import require_caller, require_staff
from . import workflow

bp = Blueprint("claims", __name__, url_prefix="/claims")


def _publish():
    return current_app.extensions["broadcaster"].publish


@bp.post("")
def create_claim():
    caller = require_caller()
    data = ClaimCreateSchema().load(request.get_json(silent=True) or {})
    claim = workflow.submit_claim(caller, data["item_id"], data["description"], publish=_publish())
    return jsonify({"claim": workflow.claim_to_dict(claim)}), 201


@bp.get("")
def list_claims():
    """List claims.

    Query params: status, itemId, studentId (staff only). Students always
    receive only their own claims.
    """
    caller = require_caller()
    args = {k: v for k, v in request.args.items() if v and v.strip()}
    filters = ClaimFilterSchema().load(args)
    claims = workflow.list_claims(caller, **filters)
    return jsonify({"claims": [workflow.claim_to_dict(c) for c in claims]})


@bp.get("/<int:claim_id>")
def get_claim(claim_id: int):
    caller = require_caller()
    return jsonify({"claim": workflow.claim_to_dict(workflow.get_claim(caller, claim_id))})


@bp.patch("/<int:claim_id>")
def review_claim(claim_id: int):
    """Review a claim (staff only).

    Body JSON: { status: 'approved' | 'rejected' | 'more_info_needed', staffNotes?: str }
    """
    caller = require_staff()
    data = ClaimReviewSchema().load(request.get_json(silent=True) or {})
    claim = workflow.review_claim(
        caller,
        claim_id,
        data["status"],
        data.get("staff_notes"),
        publish=_publish(),
    )
    return jsonify({"claim": workflow.claim_to_dict(claim)})
