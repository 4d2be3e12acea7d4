from rest_framework import serializers

from core.leads.models import ContactEvent, Lead, LeadStatusHistory


class LeadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lead
        fields = [
            "id",
            "partner_id",
            "created_by_id",
            "student_name",
            "email",
            "phone_raw",
            "phone_e164",
            "phone_country",
            "phone_valid",
            "school",
            "city",
            "status",
            "first_contacted_at",
            "last_contacted_at",
            "created_at",
            "updated_at",
        ]


class LeadCreateSerializer(serializers.Serializer):
    partner_id = serializers.UUIDField(required=False, allow_null=True)
    student_name = serializers.CharField(min_length=2, max_length=160)
    email = serializers.EmailField()
    phone_country = serializers.CharField(min_length=2, max_length=2)
    phone_national = serializers.CharField(min_length=6, max_length=30)
    school = serializers.CharField(min_length=2, max_length=160)
    city = serializers.CharField(min_length=2, max_length=120)


class LeadListQuerySerializer(serializers.Serializer):
    partner_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(required=False, choices=Lead.Status.choices)
    school = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1, max_value=100, default=20)


class LeadUpdateSerializer(serializers.Serializer):
    student_name = serializers.CharField(required=False, min_length=2, max_length=160)
    email = serializers.EmailField(required=False)
    phone_country = serializers.CharField(required=False, min_length=2, max_length=2)
    phone_national = serializers.CharField(required=False, min_length=6, max_length=30)
    school = serializers.CharField(required=False, min_length=2, max_length=160)
    city = serializers.CharField(required=False, min_length=2, max_length=120)
    status = serializers.ChoiceField(required=False, choices=Lead.Status.choices)
    note = serializers.CharField(required=False, max_length=1000)


class LeadStatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = LeadStatusHistory
        fields = ["id", "old_status", "new_status", "changed_by_id", "note", "created_at"]


class ContactEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactEvent
        fields = [
            "id",
            "user_id",
            "channel",
            "message_template_version",
            "message_rendered",
            "to_address",
            "success",
            "error_reason",
            "created_at",
        ]
