"""Serializers for caching app."""

from rest_framework import serializers

from .keys import CLEARABLE_PREFIXES


class ClearCacheInputSerializer(serializers.Serializer):
    """Validate the prefix an operator wants to clear."""
    prefix = serializers.ChoiceField(
        choices=CLEARABLE_PREFIXES,
        help_text=f"Cache namespace: {', '.join(CLEARABLE_PREFIXES)}"
    )


class ClearCacheResponseSerializer(serializers.Serializer):
    """Response serializer for a cleared prefix."""
    prefix = serializers.CharField()
    generation = serializers.IntegerField()
