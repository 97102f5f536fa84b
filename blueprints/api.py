"""
Result email API blueprint.

Routes:
- POST /api/send-result-email - render the result email and send it
  (plus an admin copy when ADMIN_EMAIL is configured)

Responses are JSON:
    200 {"ok": true}
    400 {"message": "Missing recipient email"}
    405 {"message": "Only POST allowed"}
    500 {"message": "<error>"}
"""

from flask import Blueprint, jsonify, request

from extensions import csrf, limiter
from mailjet_integration import send_result_email
from logging_config import get_logger

logger = get_logger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.route('/send-result-email', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
@csrf.exempt  # JSON API called from the browser, no form token
@limiter.limit("10 per minute", methods=["POST"])
def send_result_email_endpoint():
    """
    Send a BAC Index result by email.

    JSON body:
        name, email, company, designation, physAge, bioAge, diff,
        topFactors, recommendations
        (phone, weightKg, heightCm, bmi and score are accepted and ignored)
    """
    if request.method != 'POST':
        return jsonify({'message': 'Only POST allowed'}), 405

    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('email'):
        return jsonify({'message': 'Missing recipient email'}), 400

    try:
        send_result_email(data)
    except Exception as e:
        logger.exception("Sending result email failed")
        return jsonify({'message': str(e)}), 500

    return jsonify({'ok': True}), 200
