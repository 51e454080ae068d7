"""Admin translation management routes."""
from flask import Blueprint, jsonify, request

from polyglot.routes.helpers import (
    BadRequest, get_json_body, parse_bool, parse_content_id, parse_limit, require_fields,
)
from polyglot.services import BackfillInProgress, get_translation_manager
from polyglot.utils.auth import admin_required

admin_bp = Blueprint('admin', __name__)

ADMIN_BULK_LIMIT = 100
DEFAULT_PAGE_SIZE = 50


@admin_bp.errorhandler(BadRequest)
def handle_bad_request(e):
    return jsonify({'error': str(e)}), 400


@admin_bp.errorhandler(BackfillInProgress)
def handle_backfill_in_progress(e):
    return jsonify({'error': str(e)}), 409


@admin_bp.route('', methods=['GET'])
@admin_required
def list_translations():
    """List translations with pagination and filters."""
    lang_code = request.args.get('lang_code', 'en')
    content_type = request.args.get('content_type') or None
    manual_only = parse_bool(request.args.get('manual_only'), default=False)
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', DEFAULT_PAGE_SIZE, type=int)

    result = get_translation_manager().get_admin_translations(
        lang_code, content_type, manual_only, page, limit
    )

    return jsonify({
        'success': True,
        'data': result['items'],
        'pagination': result['pagination'],
    }), 200


@admin_bp.route('', methods=['POST'])
@admin_required
def post_action():
    data = get_json_body()
    action = data.get('action', 'save')

    if action != 'bulk_translate':
        raise BadRequest('Invalid action')

    content_type = data.get('content_type')
    target_lang = data.get('target_lang')
    if not content_type or not target_lang:
        raise BadRequest('content_type and target_lang are required')

    limit = parse_limit(data.get('limit'), ADMIN_BULK_LIMIT)
    result = get_translation_manager().bulk_auto_translate(content_type, target_lang, limit)

    return jsonify({
        'success': True,
        'message': 'Bulk translation completed',
        'result': result,
    }), 200


@admin_bp.route('', methods=['PUT'])
@admin_required
def update_translation():
    """Manual edit; always stored as a manual override."""
    data = get_json_body()
    if 'id' not in data:
        raise BadRequest('Invalid data or missing ID')
    require_fields(data, ['content_type', 'field_name', 'lang_code', 'translated_text'])

    success = get_translation_manager().save_translation(
        data['content_type'],
        parse_content_id(data.get('content_id')),
        data['field_name'],
        data['lang_code'],
        data.get('original_text') or '',
        data['translated_text'],
        True,
    )
    if not success:
        return jsonify({'success': False, 'error': 'Failed to update translation'}), 500

    return jsonify({'success': True, 'message': 'Translation updated successfully'}), 200
