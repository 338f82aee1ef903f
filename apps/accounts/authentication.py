"""
Authentication against identity-provider issued JWTs.

The provider signs the access token; its ``sub`` claim is the local user id.
When the token also carries an ``email`` claim the user is provisioned (or
refreshed) from the claims, which is how users come to exist at all.
"""

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .services import AccountsServiceError, sync_user_from_claims


class IdentityProviderJWTAuthentication(JWTAuthentication):
    """JWT authentication that creates the user on first authentication."""

    def get_user(self, validated_token):
        if 'email' not in validated_token:
            return super().get_user(validated_token)

        try:
            subject = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        try:
            user = sync_user_from_claims(
                subject=str(subject),
                email=validated_token['email'],
                display_name=validated_token.get('name', ''),
            )
        except AccountsServiceError as e:
            raise AuthenticationFailed(str(e), code='identity_conflict')

        if not user.is_active:
            raise AuthenticationFailed('User is inactive', code='user_inactive')

        return user
