"""Public translation routes plus the admin write actions."""
import logging

from flask import Blueprint, jsonify, request

from polyglot.routes.helpers import (
    BadRequest, get_json_body, parse_bool, parse_content_id, parse_limit, require_fields,
)
from polyglot.services import BackfillInProgress, ResolutionError, get_translation_manager
from polyglot.utils.auth import admin_required

logger = logging.getLogger(__name__)

translations_bp = Blueprint('translations', __name__)

PUBLIC_BULK_LIMIT = 50

SAVE_FIELDS = ['content_type', 'field_name', 'lang_code', 'original_text', 'translated_text']


@translations_bp.errorhandler(BadRequest)
def handle_bad_request(e):
    return jsonify({'error': str(e)}), 400


@translations_bp.errorhandler(BackfillInProgress)
def handle_backfill_in_progress(e):
    return jsonify({'error': str(e)}), 409


# ============================================================================
# LOOKUPS
# ============================================================================

@translations_bp.route('', methods=['GET'])
def get_translation():
    """Single lookup. Answers with the fallback when nothing is stored."""
    content_type = request.args.get('content_type')
    field_name = request.args.get('field_name')
    content_id = parse_content_id(request.args.get('content_id'))
    lang_code = request.args.get('lang_code', 'en')
    fallback = request.args.get('fallback')

    if not content_type or not field_name:
        raise BadRequest('content_type and field_name are required')

    manager = get_translation_manager()
    try:
        translation = manager.get_translation(content_type, content_id, field_name, lang_code, fallback)
    except ResolutionError as e:
        logger.error(f"Translation lookup failed, serving fallback: {e}")
        translation = fallback

    return jsonify({
        'success': True,
        'translation': translation,
        'lang_code': lang_code,
    }), 200


@translations_bp.route('/batch', methods=['GET'])
def get_translation_batch():
    """All translated fields of one content object."""
    content_type = request.args.get('content_type')
    content_id = parse_content_id(request.args.get('content_id'), required=True)
    lang_code = request.args.get('lang_code', 'en')

    if not content_type:
        raise BadRequest('content_type and content_id are required')

    try:
        translations = get_translation_manager().get_translations(content_type, content_id, lang_code)
    except ResolutionError as e:
        logger.error(f"Batch lookup failed: {e}")
        return jsonify({'success': False, 'error': 'Translations temporarily unavailable'}), 503

    return jsonify({
        'success': True,
        'content_type': content_type,
        'content_id': content_id,
        'lang_code': lang_code,
        'translations': translations,
    }), 200


@translations_bp.route('/languages', methods=['GET'])
def get_languages():
    active_only = parse_bool(request.args.get('active_only'), default=True)
    try:
        languages = get_translation_manager().get_supported_languages(active_only)
    except ResolutionError as e:
        logger.error(f"Language lookup failed: {e}")
        return jsonify({'success': False, 'error': 'Languages temporarily unavailable'}), 503

    return jsonify({'success': True, 'languages': languages}), 200


@translations_bp.route('/stats', methods=['GET'])
def get_stats():
    lang_code = request.args.get('lang_code')
    stats = get_translation_manager().get_translation_stats(lang_code)
    return jsonify({'success': True, 'stats': stats}), 200


# ============================================================================
# ADMIN ACTIONS
# ============================================================================

@translations_bp.route('', methods=['POST'])
@admin_required
def post_action():
    """Dispatch on ``action``: save (default), auto_translate, bulk_translate."""
    data = get_json_body()
    action = data.get('action', 'save')
    manager = get_translation_manager()

    if action == 'save':
        require_fields(data, SAVE_FIELDS)
        success = manager.save_translation(
            data['content_type'],
            parse_content_id(data.get('content_id')),
            data['field_name'],
            data['lang_code'],
            data['original_text'],
            data['translated_text'],
            parse_bool(data.get('manual_override'), default=False),
        )
        if not success:
            return jsonify({'success': False, 'error': 'Failed to save translation'}), 500
        return jsonify({'success': True, 'message': 'Translation saved successfully'}), 200

    if action == 'auto_translate':
        text = data.get('text')
        source_lang = data.get('source_lang', 'en')
        target_lang = data.get('target_lang')
        if not text or not target_lang:
            raise BadRequest('text and target_lang are required')

        translated = manager.auto_translate(text, source_lang, target_lang)
        return jsonify({
            'success': True,
            'original': text,
            'translated': translated,
            'source_lang': source_lang,
            'target_lang': target_lang,
        }), 200

    if action == 'bulk_translate':
        content_type = data.get('content_type')
        target_lang = data.get('target_lang')
        if not content_type or not target_lang:
            raise BadRequest('content_type and target_lang are required')

        limit = parse_limit(data.get('limit'), PUBLIC_BULK_LIMIT)
        result = manager.bulk_auto_translate(content_type, target_lang, limit)
        return jsonify({'success': True, 'result': result}), 200

    raise BadRequest('Invalid action')


@translations_bp.route('', methods=['PUT'])
@admin_required
def put_update():
    """Manual edit of an existing record (``id`` present) or a language status change."""
    data = get_json_body()
    manager = get_translation_manager()

    if 'id' in data:
        require_fields(data, ['content_type', 'field_name', 'lang_code', 'translated_text'])
        success = manager.save_translation(
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

    if 'lang_code' in data and 'active' in data:
        success = manager.update_language_status(data['lang_code'], parse_bool(data['active']))
        if not success:
            return jsonify({'success': False, 'error': 'Failed to update language'}), 500
        return jsonify({'success': True, 'message': 'Language status updated successfully'}), 200

    raise BadRequest('Invalid request')
