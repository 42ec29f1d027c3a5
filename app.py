"""
Flask Web Application for the Trauma-Sensitive Intake Engine

Thin JSON chat transport around IntakeDialogueManager.
"""

from flask import Flask, request, jsonify
import logging
import os

from intake.config import EngineConfig
from intake.engine import build_dialogue_manager
from intake.utils.helpers import generate_session_id, generate_response_id
from intake.utils.response_templates import FALLBACK_RESPONSE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('INTAKE_SECRET_KEY', 'trauma-intake-dev-key')

engine = build_dialogue_manager(EngineConfig.from_env())


@app.route('/api/chat', methods=['POST'])
def chat():
    """Process one message and return the assistant's reply"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Invalid JSON body'}), 400

    session_id = data.get('session_id') or generate_session_id()

    try:
        turn = engine.process(session_id, data.get('message', ''))
        return jsonify({
            'id': turn.response_id,
            'role': 'assistant',
            'content': turn.response,
            'session_id': session_id,
            'intent': turn.intent,
            'risk_level': turn.risk_level,
            'confidence': turn.confidence,
            'extracted_data': turn.extracted_fields,
            'next_question': turn.next_question,
            'progress': turn.progress,
            'stage': turn.stage,
        })

    except Exception as e:
        logger.error(f"Error processing chat message: {type(e).__name__}")
        return jsonify({
            'id': generate_response_id(),
            'role': 'assistant',
            'content': FALLBACK_RESPONSE,
            'session_id': session_id,
        })


@app.route('/api/session/reset', methods=['POST'])
def reset_session():
    """Clear a session's collected data"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('session_id'):
        return jsonify({'success': False, 'error': 'session_id is required'}), 400

    engine.reset_session(data["session_id"])
    return jsonify({'success': True})


if __name__ == '__main__':
    host = os.environ.get('INTAKE_HOST', '0.0.0.0')
    port = int(os.environ.get('INTAKE_PORT', '5000'))
    debug = os.environ.get('INTAKE_DEBUG', '').lower() in ('1', 'true', 'yes')

    print("\n" + "="*60)
    print("TRAUMA-SENSITIVE INTAKE - CHAT API")
    print("="*60)
    print(f"\nServer starting on http://{host}:{port}")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    app.run(debug=debug, host=host, port=port)
