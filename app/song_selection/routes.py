"""
Song selection routes: next, forward, back, reset and state.
"""
import logging
from functools import wraps

from flask import Blueprint, jsonify, make_response, request

from shuffle_service.errors import InvalidTargetError, StoreUnavailableError
from shuffle_service.models import NavigationResult, SelectionResult, SelectionStatus
from shuffle_service.selection import SessionHistory

from .models import DialRequest, hint_for
from .services import SongSelectionService

logger = logging.getLogger(__name__)


def _selection_payload(result: SelectionResult) -> dict:
    payload = result.to_dict()
    hint = hint_for(result.status)
    if hint:
        payload["message"] = hint
    return payload


def create_song_selection_routes(selection_service: SongSelectionService) -> Blueprint:
    """Create song selection routes."""
    bp = Blueprint('song_selection', __name__)

    def with_session(create: bool = True):
        """Pass the caller's orchestrator to the view and set the sid cookie when new.

        Read-only views use ``create=False``: an unknown session is not
        registered, the view receives None and the body reports an empty state.
        """
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                session_id, is_new = selection_service.resolve_session()
                orchestrator = selection_service.orchestrator_for(session_id, create=create)
                try:
                    body, status_code = view(orchestrator, *args, **kwargs)
                except InvalidTargetError as exc:
                    body, status_code = exc.to_dict(), 400
                except StoreUnavailableError as exc:
                    logger.warning(f"Store unavailable for session {session_id}: {exc}")
                    body, status_code = {
                        "error": "store-unavailable",
                        "message": "The song catalog is unavailable. Please retry.",
                    }, 503

                state = orchestrator.current_state() if orchestrator else SessionHistory().snapshot()
                body["state"] = state.to_dict()
                response = make_response(jsonify(body), status_code)
                if is_new and orchestrator is not None:
                    selection_service.attach_cookie(response, session_id)
                return response
            return wrapper
        return decorator

    def _selection_status_code(result: SelectionResult) -> int:
        return 409 if result.status == SelectionStatus.SUPERSEDED else 200

    @bp.route("/api/next", methods=["POST"])
    @with_session()
    def select_next(orchestrator):
        """Select a new song for the posted dials."""
        dial_request = DialRequest.from_json(request.get_json(silent=True))
        result = orchestrator.select_next(dial_request.dials)
        return _selection_payload(result), _selection_status_code(result)

    @bp.route("/api/forward", methods=["POST"])
    @with_session()
    def navigate_forward(orchestrator):
        """Step forward in history, or select a new song at the end.

        The dials are only validated when a new selection is needed.
        """
        dials = DialRequest.raw_dials(request.get_json(silent=True))
        navigation = orchestrator.navigate_forward(dials)
        body = navigation.to_dict()
        status_code = 200
        if navigation.selection is not None:
            body["selection"] = _selection_payload(navigation.selection)
            status_code = _selection_status_code(navigation.selection)
        return body, status_code

    @bp.route("/api/back", methods=["POST"])
    @with_session(create=False)
    def navigate_back(orchestrator):
        """Step back in history; moved=false when already at the first song."""
        if orchestrator is None:
            return NavigationResult(moved=False).to_dict(), 200
        return orchestrator.navigate_back().to_dict(), 200

    @bp.route("/api/reset", methods=["POST"])
    @with_session(create=False)
    def reset_session(orchestrator):
        if orchestrator is not None:
            orchestrator.reset_session()
        return {"status": "reset"}, 200

    @bp.route("/api/state", methods=["GET"])
    @with_session(create=False)
    def current_state(orchestrator):
        return {}, 200

    return bp
