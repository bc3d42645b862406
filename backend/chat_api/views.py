from rest_framework import status
from rest_framework.response import Response

from rides_api.views import DispatchViewSet
from .serializers import (
    ChatMessageSerializer,
    ChatPageQuerySerializer,
    ChatStatsSerializer,
    DeleteMessageSerializer,
    MarkReadSerializer,
    PostMessageSerializer,
    VoiceMessageSerializer,
)


def _page_query(request):
    query = ChatPageQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    return query.validated_data.get("limit"), query.validated_data["offset"]


def _body(serializer_class, request):
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _page_response(page):
    return Response({
        "success": True,
        "messages": ChatMessageSerializer(page.messages, many=True).data,
        "total": page.total,
        "limit": page.limit,
        "offset": page.offset,
    })


class RideChatViewSet(DispatchViewSet):
    """
    Messages inside one ride. Field checks are left to the ledger so every
    caller gets the same error messages.
    """

    def list(self, request, ride_id=None):
        limit, offset = _page_query(request)
        return _page_response(self.dispatch_context.chat.list_messages(ride_id, limit=limit, offset=offset))

    def create(self, request, ride_id=None):
        data = _body(PostMessageSerializer, request)
        message = self.dispatch_context.chat.post_message(
            ride_id,
            data.get("senderId"),
            data.get("senderType"),
            data.get("message"),
            data.get("messageType"),
        )
        return Response(
            {"success": True, "message": ChatMessageSerializer(message).data},
            status=status.HTTP_201_CREATED,
        )

    def voice_message(self, request, ride_id=None):
        data = _body(VoiceMessageSerializer, request)
        message = self.dispatch_context.chat.post_voice_message(
            ride_id,
            data.get("senderId"),
            data.get("senderType"),
            data.get("audioUrl"),
            data.get("transcription"),
        )
        return Response(
            {"success": True, "message": ChatMessageSerializer(message).data},
            status=status.HTTP_201_CREATED,
        )

    def mark_read(self, request, ride_id=None):
        data = _body(MarkReadSerializer, request)
        updated = self.dispatch_context.chat.mark_read(ride_id, data.get("userId"), data.get("userType"))
        return Response({"success": True, "updated": updated})


class UserChatViewSet(DispatchViewSet):

    def unread_count(self, request, user_id=None):
        count = self.dispatch_context.chat.unread_count(user_id, request.query_params.get("userType"))
        return Response({"success": True, "unreadCount": count})

    def history(self, request, user_id=None):
        limit, offset = _page_query(request)
        page = self.dispatch_context.chat.user_history(
            user_id,
            request.query_params.get("userType"),
            limit=limit,
            offset=offset,
        )
        return _page_response(page)


class ChatModerationViewSet(DispatchViewSet):

    def destroy(self, request, message_id=None):
        reason = _body(DeleteMessageSerializer, request).get("reason") or request.query_params.get("reason")
        deleted = self.dispatch_context.chat.delete_message(message_id, reason)
        return Response({"success": True, "deletedMessageId": deleted.id})

    def stats(self, request):
        return Response({"success": True, "stats": ChatStatsSerializer(self.dispatch_context.chat.stats()).data})
