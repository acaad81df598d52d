from rest_framework import serializers

from accounts.serializers import AccountPublicSerializer
from escrow.models import EscrowTicket, EscrowMessage


class EscrowMessageSerializer(serializers.ModelSerializer):
    senderId = serializers.IntegerField(source='sender_account_id', read_only=True)

    class Meta:
        model = EscrowMessage
        fields = [
            'id',
            'sequence',
            'sender',
            'senderId',
            'message',
            'timestamp',
            'read'
        ]


class EscrowTicketSerializer(serializers.ModelSerializer):
    initiator = AccountPublicSerializer(read_only=True)
    recipient = AccountPublicSerializer(read_only=True)
    invitationStatus = serializers.CharField(source='invitation_status')
    transactionAmount = serializers.DecimalField(source='transaction_amount', max_digits=18, decimal_places=2)
    messages = EscrowMessageSerializer(many=True, read_only=True)
    lastActivity = serializers.DateTimeField(source='last_activity')
    invitationSentAt = serializers.DateTimeField(source='invitation_sent_at')
    acceptedAt = serializers.DateTimeField(source='accepted_at')
    closedAt = serializers.DateTimeField(source='closed_at')
    closedBy = serializers.CharField(source='closed_by', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = EscrowTicket
        fields = [
            'id',
            'title',
            'description',
            'initiator',
            'recipient',
            'status',
            'invitationStatus',
            'transactionAmount',
            'currency',
            'category',
            'priority',
            'messages',
            'lastActivity',
            'invitationSentAt',
            'acceptedAt',
            'closedAt',
            'closedBy',
            'createdAt',
            'updatedAt'
        ]


class AdminEscrowTicketSerializer(EscrowTicketSerializer):
    '''
    Adds the internal fields only global admins may see
    '''
    adminNotes = serializers.CharField(source='admin_notes', allow_null=True)
    metadata = serializers.SerializerMethodField()

    class Meta:
        model = EscrowTicket
        fields = EscrowTicketSerializer.Meta.fields + [
            'adminNotes',
            'metadata'
        ]

    def get_metadata(self, obj):
        return {
            'ipAddress': obj.ip_address,
            'userAgent': obj.user_agent,
            'source': obj.source
        }
