from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    expiresAt = serializers.DateTimeField(source='expires_at', read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'type',
            'read',
            'data',
            'expiresAt',
            'createdAt',
        ]


class NotificationPushSerializer(serializers.ModelSerializer):
    '''
    Payload pushed to a live websocket connection
    '''
    timestamp = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'type',
            'data',
            'timestamp',
        ]
