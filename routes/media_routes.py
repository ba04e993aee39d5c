from flask import Blueprint, request, jsonify
from flasgger import swag_from
import logging

from helpers.authz import AuthKind, auth_context
from helpers.errors import UnauthorizedError, ValidationError
from helpers.http_responses import error_response
from services.cloudinary import delete_image

logger = logging.getLogger(__name__)

# Blueprint für Bild-Operationen beim Bild-Hoster
media_bp = Blueprint('media', __name__)


@media_bp.route('/cloudinary/delete', methods=['POST'])
@auth_context
@swag_from('../resources/swagger/cloudinary_delete_post.yml')
def delete_cloudinary_image(auth):
    """Delete an uploaded image by its public id (any signed-in session)."""
    if auth.kind is AuthKind.UNAUTHENTICATED:
        raise UnauthorizedError('Unauthorized')

    data = request.get_json(silent=True) or {}
    public_id = data.get('publicId') or data.get('public_id')
    if not public_id:
        raise ValidationError('Missing public_id')

    logger.debug(f"delete_cloudinary_image {public_id} by identity {auth.identity}")
    result = delete_image(public_id)
    if not result.success:
        return error_response('image_delete_failed', 'Failed to delete image', 500, details=result.result)
    return jsonify({'message': 'Image deleted successfully', 'result': result.result}), 200
