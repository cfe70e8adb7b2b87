"""Minimal demonstration of the chat gateway (uses AI_* env vars, mock by default)."""

from chat_gateway import ConversationTurn, get_default_gateway

if __name__ == "__main__":
    gateway = get_default_gateway()
    history = [
        ConversationTurn(role="user", content="Hello!"),
        ConversationTurn(role="assistant", content="Hi, how can I help?"),
    ]
    question = "Can you show me some Python code?"
    reply = gateway.send_message(question, history)
    print("User:", question)
    print("Assistant:", reply)
    print("Title:", gateway.generate_title(question, reply))
    print("Available:", gateway.is_available())
