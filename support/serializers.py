from rest_framework import serializers

from accounts.serializers import AccountPublicSerializer
from support.models import (
    SupportTicket,
    SupportMessage,
    PublicSupportTicket,
    PublicSupportResponse,
    MessageSender
)


class SupportMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = SupportMessage
        fields = [
            'id',
            'sender',
            'message',
            'timestamp',
            'read'
        ]


class SupportTicketSerializer(serializers.ModelSerializer):
    assignedTo = serializers.CharField(source='assigned_to', read_only=True)
    messages = SupportMessageSerializer(many=True, read_only=True)
    lastReply = serializers.DateTimeField(source='last_reply', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = SupportTicket
        fields = [
            'id',
            'subject',
            'description',
            'status',
            'priority',
            'category',
            'assignedTo',
            'messages',
            'lastReply',
            'createdAt',
            'updatedAt'
        ]


class SupportTicketCreateSerializer(serializers.ModelSerializer):
    subject = serializers.CharField(max_length=200, trim_whitespace=True)
    description = serializers.CharField(trim_whitespace=True)

    class Meta:
        model = SupportTicket
        fields = [
            'subject',
            'description',
            'priority',
            'category'
        ]


class AdminSupportTicketSerializer(SupportTicketSerializer):
    type = serializers.SerializerMethodField()
    user = AccountPublicSerializer(source='account', read_only=True)
    displayName = serializers.CharField(source='account.full_name', read_only=True)
    displayEmail = serializers.CharField(source='account.email', read_only=True)

    class Meta:
        model = SupportTicket
        fields = SupportTicketSerializer.Meta.fields + [
            'type',
            'user',
            'displayName',
            'displayEmail'
        ]

    def get_type(self, obj):
        return 'user'


class PublicSupportResponseSerializer(serializers.ModelSerializer):
    respondedBy = serializers.CharField(source='responded_by')
    respondedAt = serializers.DateTimeField(source='responded_at')

    class Meta:
        model = PublicSupportResponse
        fields = [
            'id',
            'message',
            'respondedBy',
            'respondedAt'
        ]


class AdminPublicSupportTicketSerializer(serializers.ModelSerializer):
    '''
    Presents an anonymous ticket in the same shape as a user ticket so both
    kinds can share one admin inbox.
    '''
    type = serializers.SerializerMethodField()
    description = serializers.CharField(source='message')
    displayName = serializers.CharField(source='name')
    displayEmail = serializers.CharField(source='email')
    responses = PublicSupportResponseSerializer(many=True, read_only=True)
    messages = serializers.SerializerMethodField()
    lastReply = serializers.DateTimeField(source='last_reply')
    createdAt = serializers.DateTimeField(source='created_at')
    metadata = serializers.SerializerMethodField()

    class Meta:
        model = PublicSupportTicket
        fields = [
            'id',
            'type',
            'subject',
            'description',
            'status',
            'priority',
            'category',
            'source',
            'displayName',
            'displayEmail',
            'responses',
            'messages',
            'lastReply',
            'createdAt',
            'metadata'
        ]

    def get_type(self, obj):
        return 'public'

    def get_messages(self, obj):
        messages = [{
            'sender': MessageSender.USER,
            'message': obj.message,
            'timestamp': obj.created_at,
            'read': True
        }]
        for response in obj.responses.all():
            messages.append({
                'sender': MessageSender.ADMIN,
                'message': response.message,
                'timestamp': response.responded_at,
                'read': True
            })
        return messages

    def get_metadata(self, obj):
        return {
            'ipAddress': obj.ip_address,
            'userAgent': obj.user_agent
        }
