from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def json_errors(view):
    """Map domain errors raised by a JSON view to status codes.

    Anything else is logged with its traceback and answered with a generic 500.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            body = {"message": str(e)}
            if e.errors:
                body["errors"] = e.errors
            return jsonify(body), e.status_code
        except DomainError as e:
            if e.status_code >= 500:
                logger.error("%s failed: %s", view.__name__, e)
                return jsonify({"message": "Internal server error."}), e.status_code
            return jsonify({"message": str(e)}), e.status_code
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"message": "Internal server error."}), 500

    return wrapper
