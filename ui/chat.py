"""Practice chat page UI"""
import gradio as gr
import httpx

from core.config import API_PREFIX, BASE_URL
from services.personalities import PERSONALITIES


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def error_text(resp):
    """Error string from an envelope response"""
    try:
        body = resp.json()
    except ValueError:
        return f"Request failed ({resp.status_code})"
    details = body.get("details")
    if details:
        return "; ".join(details)
    return body.get("error") or f"Request failed ({resp.status_code})"


def create_chat_page():
    """Create the practice chat interface"""
    with gr.Blocks(title="ChatLingo Practice") as chat_page:
        token = gr.State(None)
        conversation_id = gr.State(None)

        gr.Markdown("## ChatLingo Practice")

        with gr.Row():
            with gr.Column(scale=1):
                email = gr.Textbox(label="Email")
                pw = gr.Textbox(label="Password", type="password")
                login_btn = gr.Button("Login", variant="primary")
                personality = gr.Dropdown(
                    label="AI Personality",
                    choices=[(p.name, p.key) for p in PERSONALITIES.values()],
                    value="friendly_teacher",
                    interactive=True,
                )
                category = gr.Textbox(label="Learning focus (optional)", placeholder="e.g. CET-4")
                new_chat_btn = gr.Button("+ New Conversation")
                status = gr.Markdown()

            with gr.Column(scale=3):
                chatbot = gr.Chatbot(type="messages", height=520, label=None)
                with gr.Row():
                    txt = gr.Textbox(placeholder="Write in English…", scale=5, container=False, show_label=False)
                    send_btn = gr.Button("Send", scale=1, variant="primary")

        async def on_login(email_value, password_value):
            async with httpx.AsyncClient(base_url=BASE_URL) as client:
                resp = await client.post(
                    f"{API_PREFIX}/auth/login",
                    json={"email": email_value, "password": password_value},
                )
            if resp.status_code != 200:
                return None, f"❌ {error_text(resp)}"
            data = resp.json()["data"]
            return data["tokens"]["accessToken"], f"✅ Logged in as {data['user']['username']}"

        async def start_conversation(access_token, personality_key, category_value):
            if not access_token:
                return None, [], "Please log in first."
            body = {"conversationType": "free_talk", "aiPersonality": personality_key}
            if category_value:
                body["essentialCategory"] = category_value
            async with httpx.AsyncClient(base_url=BASE_URL) as client:
                resp = await client.post(f"{API_PREFIX}/ai/conversations", json=body, headers=auth_headers(access_token))
            if resp.status_code != 201:
                return None, [], f"❌ {error_text(resp)}"
            data = resp.json()["data"]
            return data["conversationId"], [{"role": "assistant", "content": data["welcomeMessage"]}], ""

        async def on_send(user_text, messages, access_token, cid):
            """Show the learner message at once, then the AI reply"""
            messages = list(messages or [])
            if not user_text:
                yield messages, "", gr.update()
                return
            if not (access_token and cid):
                yield messages + [{"role": "assistant", "content": "Log in and start a conversation first."}], "", gr.update()
                return

            messages.append({"role": "user", "content": user_text})
            messages.append({"role": "assistant", "content": "..."})
            yield messages, "", gr.update()

            async with httpx.AsyncClient(base_url=BASE_URL, timeout=60) as client:
                resp = await client.post(
                    f"{API_PREFIX}/ai/conversations/{cid}/messages",
                    json={"messageText": user_text},
                    headers=auth_headers(access_token),
                )
            if resp.status_code != 200:
                messages[-1]["content"] = f"⚠️ {error_text(resp)}"
                yield messages, "", gr.update()
                return

            data = resp.json()["data"]
            messages[-1]["content"] = data["aiResponse"]
            yield messages, "", f"{data['messageCount']} messages in this conversation"

        login_btn.click(on_login, inputs=[email, pw], outputs=[token, status])
        new_chat_btn.click(start_conversation, inputs=[token, personality, category], outputs=[conversation_id, chatbot, status])
        txt.submit(on_send, inputs=[txt, chatbot, token, conversation_id], outputs=[chatbot, txt, status])
        send_btn.click(on_send, inputs=[txt, chatbot, token, conversation_id], outputs=[chatbot, txt, status])

    return chat_page
