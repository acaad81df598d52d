from rest_framework import serializers

from accounts.models import Account, GlobalAdmin


class AccountPublicSerializer(serializers.ModelSerializer):
    '''
    Profile fields safe to show to the other party of a ticket
    '''
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    profileImage = serializers.CharField(source='profile_image', allow_null=True)

    class Meta:
        model = Account
        fields = [
            'id',
            'firstName',
            'lastName',
            'email',
            'profileImage'
        ]


class AccountSearchSerializer(AccountPublicSerializer):
    businessInfo = serializers.SerializerMethodField()
    isRecommended = serializers.BooleanField(source='is_recommended')

    class Meta:
        model = Account
        fields = AccountPublicSerializer.Meta.fields + [
            'businessInfo',
            'isRecommended'
        ]

    def get_businessInfo(self, obj):
        return {'businessName': obj.business_name}


class GlobalAdminSerializer(serializers.ModelSerializer):
    isOriginal = serializers.BooleanField(source='is_original')
    lastLogin = serializers.DateTimeField(source='last_login')
    createdAt = serializers.DateTimeField(source='created_at')
    createdBy = serializers.SerializerMethodField()

    class Meta:
        model = GlobalAdmin
        fields = [
            'id',
            'email',
            'isOriginal',
            'lastLogin',
            'createdBy',
            'createdAt'
        ]

    def get_createdBy(self, obj):
        if obj.created_by is None:
            return None
        return {
            'id': obj.created_by.id,
            'email': obj.created_by.email
        }


class AdminAccountSerializer(AccountSearchSerializer):
    isActive = serializers.BooleanField(source='is_active')
    isEmailConfirmed = serializers.BooleanField(source='is_email_confirmed')
    isDeleted = serializers.BooleanField(source='is_deleted')
    deletedAt = serializers.DateTimeField(source='deleted_at')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Account
        fields = AccountSearchSerializer.Meta.fields + [
            'isActive',
            'isEmailConfirmed',
            'isDeleted',
            'deletedAt',
            'createdAt'
        ]
