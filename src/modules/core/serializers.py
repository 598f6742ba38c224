"""Serializers describing the shared error envelope (OpenAPI only)."""

from __future__ import annotations

from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    element = serializers.CharField(required=False)
    code = serializers.CharField()
    description = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    timestamp = serializers.CharField()
    status = serializers.IntegerField()
    error = serializers.CharField()
    message = serializers.CharField()
    path = serializers.CharField()
    details = ErrorDetailSerializer(many=True, required=False)
