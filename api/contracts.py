"""Contract PDF endpoint."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify, request

from billing.metadata import to_bool
from contracts.delivery import contract_filename, deliver_contract
from contracts.render import render_pdf, resolve_lang
from core.errors import ApiError
from core.log import get_logger

logger = get_logger(__name__)

contracts_api = Blueprint("contracts", __name__)

USAGE = 'OK: POST JSON to this endpoint to receive a PDF. Example: { "lang":"es","customer_name":"..." }'


@contracts_api.route("/api/contracts/generate", methods=["GET", "POST"])
def generate() -> Any:
    # opening the URL in a browser should not look like an outage
    if request.method == "GET":
        return Response(USAGE, mimetype="text/plain")

    data = request.get_json(force=True, silent=True) or {}
    lang = resolve_lang(data.get("lang"))
    deliver = to_bool(data.get("deliver"))
    if deliver and not str(data.get("email") or "").strip():
        raise ApiError(400, error="email is required for delivery")

    try:
        pdf = render_pdf({**data, "lang": lang})
    except Exception as exc:
        logger.exception("[contracts] GEN_PDF_ERROR")
        raise ApiError(500, error="GEN_PDF_ERROR", message=str(exc)) from exc

    if deliver:
        try:
            return jsonify(deliver_contract(pdf, data, lang))
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("[contracts] delivery failed")
            raise ApiError(500, error="DELIVERY_ERROR", message=str(exc)) from exc

    response = Response(pdf, mimetype="application/pdf")
    response.headers["Content-Disposition"] = f'attachment; filename="{contract_filename()}"'
    return response
