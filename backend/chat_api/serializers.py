from rest_framework import serializers


class ChatPageQuerySerializer(serializers.Serializer):
    # Without a limit the ledger falls back to its policy page size.
    limit = serializers.IntegerField(required=False, min_value=0)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


class ChatMessageSerializer(serializers.Serializer):
    id = serializers.CharField()
    rideId = serializers.CharField(source="ride_id")
    senderId = serializers.CharField(source="sender_id")
    senderType = serializers.CharField(source="sender_type.value")
    message = serializers.CharField()
    messageType = serializers.CharField(source="message_type.value")
    timestamp = serializers.DateTimeField()
    isRead = serializers.BooleanField(source="is_read")
    audioUrl = serializers.CharField(source="audio_url", allow_null=True)
    transcriptionConfidence = serializers.FloatField(source="transcription_confidence", allow_null=True)


class ChatStatsSerializer(serializers.Serializer):
    totalMessages = serializers.IntegerField(source="total_messages")
    messagesByType = serializers.DictField(source="messages_by_type", child=serializers.IntegerField())
    unreadMessages = serializers.IntegerField(source="unread_messages")
    messagesToday = serializers.IntegerField(source="messages_today")
    averageResponseTime = serializers.IntegerField(source="average_response_time")
    timestamp = serializers.DateTimeField(source="now")


# --- Input ---
# Fields are optional here: the ledger reports missing ones with its own messages.

def _text(**kwargs):
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, **kwargs)


class PostMessageSerializer(serializers.Serializer):
    senderId = _text()
    senderType = _text()
    message = _text(trim_whitespace=False)
    messageType = _text(default="text")


class VoiceMessageSerializer(serializers.Serializer):
    senderId = _text()
    senderType = _text()
    audioUrl = _text()
    transcription = _text()


class MarkReadSerializer(serializers.Serializer):
    userId = _text()
    userType = _text()


class DeleteMessageSerializer(serializers.Serializer):
    reason = _text()
