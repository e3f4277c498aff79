#!/usr/bin/env python3
"""
Glitchify Editor API Server
Thin HTTP host around EditSession: one session per open document, every
editing rule lives in the core.
"""

import os
import logging
import uuid
from io import BytesIO
from typing import Optional
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from .errors import ImageDecodeError, InvalidParameter, NoImageLoaded
from .services.edit_session import EditSession
from .services.effect_service import EffectService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")) * 1024 * 1024
EXPORT_FILENAME = os.getenv("EXPORT_FILENAME", "glitchify-edited.png")

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

logger = logging.getLogger(__name__)

effect_service = EffectService()

# One EditSession per open document
sessions = {}


def get_or_create_session(session_id: str = None) -> tuple:
    """Get existing session or create new one."""
    if session_id is None:
        session_id = str(uuid.uuid4())

    if session_id not in sessions:
        sessions[session_id] = EditSession(effect_service=effect_service)

    return session_id, sessions[session_id]


def lookup_session(session_id: Optional[str]) -> Optional[EditSession]:
    if not session_id or not isinstance(session_id, str):
        return None
    return sessions.get(session_id)


def session_payload(session_id: str, session: EditSession, message: str, success: bool = True) -> dict:
    """Common JSON body: what the UI needs to redraw buttons and canvas."""
    current = session.current_buffer()
    return {
        'success': success,
        'session_id': session_id,
        'state': session.state.value,
        'width': current.width if current else None,
        'height': current.height if current else None,
        'can_undo': session.can_undo(),
        'can_redo': session.can_redo(),
        'image_url': f"/api/image/{session_id}" if current else None,
        'message': message,
    }


def json_body() -> dict:
    """JSON object of the request; anything else (list, scalar, invalid JSON) reads as empty."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def request_session():
    """Session named in the JSON body, or an error response."""
    body = json_body()
    session_id = body.get('session_id')
    session = lookup_session(session_id)
    if session is None:
        return body, None, None, (jsonify({'success': False, 'message': 'Invalid session'}), 400)
    return body, session_id, session, None


def png_response(data: bytes, as_attachment: bool = False):
    return send_file(
        BytesIO(data),
        mimetype='image/png',
        as_attachment=as_attachment,
        download_name=EXPORT_FILENAME,
    )


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Glitchify Editor API is running',
        'active_sessions': len(sessions)
    })


@app.route('/api/effects', methods=['GET'])
def list_effects():
    """Effect catalog with parameter ranges and defaults."""
    return jsonify({
        'success': True,
        'policy': effect_service.policy,
        'effects': [definition.as_dict() for definition in effect_service.list_effects()],
    })


@app.route('/api/load', methods=['POST'])
def load_image():
    """Load an uploaded image into a (new or existing) session."""
    file = request.files.get('image')
    if file is None or file.filename == '':
        return jsonify({'success': False, 'message': 'No image provided'}), 400

    session_id, session = get_or_create_session(request.form.get('session_id'))
    try:
        session.load(file.read(), file.mimetype)
    except ImageDecodeError as e:
        logger.warning(f"Could not decode upload for session {session_id}: {e}")
        return jsonify({'success': False, 'session_id': session_id, 'message': f'Could not read image: {e}'}), 400

    logger.info(f"Session {session_id} loaded {file.filename}")
    return jsonify(session_payload(session_id, session, 'Image loaded successfully!'))


@app.route('/api/apply', methods=['POST'])
def apply_effect():
    """Apply one effect with the given parameters."""
    body, session_id, session, error = request_session()
    if error:
        return error

    effect_id = body.get('effect')
    try:
        session.apply(effect_id, body.get('params'))
    except InvalidParameter as e:
        logger.warning(f"Rejected {effect_id} for session {session_id}: {e}")
        return jsonify({'success': False, 'session_id': session_id, 'message': str(e)}), 400
    except NoImageLoaded as e:
        return jsonify({'success': False, 'session_id': session_id, 'message': str(e)}), 409

    message = effect_service.get_definition(effect_id).success_message
    return jsonify(session_payload(session_id, session, message))


@app.route('/api/undo', methods=['POST'])
def undo():
    body, session_id, session, error = request_session()
    if error:
        return error

    if session.undo():
        return jsonify(session_payload(session_id, session, 'Undone'))
    return jsonify(session_payload(session_id, session, 'Nothing to undo', success=False))


@app.route('/api/redo', methods=['POST'])
def redo():
    body, session_id, session, error = request_session()
    if error:
        return error

    if session.redo():
        return jsonify(session_payload(session_id, session, 'Redone'))
    return jsonify(session_payload(session_id, session, 'Nothing to redo', success=False))


@app.route('/api/reset', methods=['POST'])
def reset_image():
    body, session_id, session, error = request_session()
    if error:
        return error

    try:
        session.reset()
    except NoImageLoaded as e:
        return jsonify({'success': False, 'session_id': session_id, 'message': str(e)}), 409

    return jsonify(session_payload(session_id, session, 'Image reset to original!'))


@app.route('/api/image/<session_id>')
def serve_image(session_id):
    """Current buffer as PNG, for display."""
    session = lookup_session(session_id)
    if session is None:
        return jsonify({'success': False, 'message': 'Invalid session'}), 400
    try:
        return png_response(session.export_current())
    except NoImageLoaded as e:
        return jsonify({'success': False, 'message': str(e)}), 409


@app.route('/api/export/<session_id>')
def export_image(session_id):
    """Current buffer as a PNG download."""
    session = lookup_session(session_id)
    if session is None:
        return jsonify({'success': False, 'message': 'Invalid session'}), 400
    try:
        data = session.export_current()
    except NoImageLoaded as e:
        return jsonify({'success': False, 'message': str(e)}), 409

    logger.info(f"Session {session_id} exported {len(data)} bytes")
    return png_response(data, as_attachment=True)


@app.route('/api/clear-session', methods=['POST'])
def clear_session():
    """Clear a session and free memory."""
    body = json_body()
    session_id = body.get('session_id')
    if lookup_session(session_id) is not None:
        del sessions[session_id]
        return jsonify({'success': True, 'message': 'Session cleared'})
    return jsonify({'success': False, 'message': 'Session not found'})


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'success': False, 'message': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'success': False, 'message': 'Internal server error'}), 500


def main():
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "5000"))

    print("🚀 Starting Glitchify Editor API Server...")
    print(f"🔧 Max upload size: {MAX_CONTENT_LENGTH // (1024*1024)}MB")
    print(f"🎛️  Parameter policy: {effect_service.policy}")
    print("🌐 CORS enabled for frontend communication")
    print("=" * 60)

    # Requests against one EditSession must not interleave
    app.run(host=host, port=port, debug=False, threaded=False)


if __name__ == '__main__':
    main()
