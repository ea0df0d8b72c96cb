import logging

from flask import Blueprint

from models import storage

logger = logging.getLogger(__name__)

bp = Blueprint("health", __name__)

VERSION = "1.0.0"


@bp.get("/health")
def health():
    """
    Health check, including database reachability
    ---
    tags:
      - Health
    responses:
      200:
        description: API and database are up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            database:
              type: string
              example: up
            version:
              type: string
              example: 1.0.0
      503:
        description: Database unreachable (status is "degraded")
    """
    if storage.ping():
        return {"status": "ok", "database": "up", "version": VERSION}, 200
    logger.warning("Health check: database unreachable")
    return {"status": "degraded", "database": "down", "version": VERSION}, 503
