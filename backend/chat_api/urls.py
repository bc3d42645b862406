from django.urls import path

from .views import ChatModerationViewSet, RideChatViewSet, UserChatViewSet


def build_urlpatterns(dispatch_context):
    """
    Chat endpoints bound to one DispatchContext.
    """
    def bind(viewset, actions):
        return viewset.as_view(actions, dispatch_context=dispatch_context)

    return [
        path("rides/<str:ride_id>/messages", bind(RideChatViewSet, {"get": "list", "post": "create"}), name="chat-messages"),
        path("rides/<str:ride_id>/messages/read", bind(RideChatViewSet, {"patch": "mark_read"}), name="chat-mark-read"),
        path("rides/<str:ride_id>/voice-message", bind(RideChatViewSet, {"post": "voice_message"}), name="chat-voice"),
        path("users/<str:user_id>/unread-count", bind(UserChatViewSet, {"get": "unread_count"}), name="chat-unread-count"),
        path("users/<str:user_id>/history", bind(UserChatViewSet, {"get": "history"}), name="chat-history"),
        path("messages/<str:message_id>", bind(ChatModerationViewSet, {"delete": "destroy"}), name="chat-delete"),
        path("stats", bind(ChatModerationViewSet, {"get": "stats"}), name="chat-stats"),
    ]
