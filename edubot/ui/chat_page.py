"""NiceGUI chat page wiring the session manager and document coordinators."""

import logging

from nicegui import events, ui

from edubot.client.api import ServiceClient
from edubot.config import get_client_config
from edubot.library import (
    DeleteCoordinator,
    DeleteResultKind,
    DocumentLibrary,
    SelectedFile,
    UploadCoordinator,
)
from edubot.models.schemas import DocumentStatus, Sender, SessionState, Turn
from edubot.session import SessionManager, SubmitStatus

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<style>
    body { background: #0f172a; min-height: 100vh; }

    .sidebar { background: rgba(30, 41, 59, 0.6); border-right: 1px solid #334155; }
    .header { background: linear-gradient(135deg, #7c3aed 0%, #4f46e5 100%); }

    .message-user {
        background: linear-gradient(135deg, #7c3aed 0%, #9333ea 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: rgba(30, 41, 59, 0.8);
        color: #f1f5f9;
        border: 1px solid #334155;
        border-radius: 18px 18px 18px 4px;
    }

    .message-text { white-space: pre-wrap; }
    .doc-card { background: rgba(51, 65, 85, 0.4); border-radius: 12px; }
    .doc-deleting { opacity: 0.5; }
</style>
"""

_CONNECTION_LABELS = {
    SessionState.UNBOUND: "New Chat",
    SessionState.BOUND: "● Connected",
    SessionState.EXPIRED: "Reconnecting...",
    SessionState.REBINDING: "Reconnecting...",
}


async def ask_subject() -> str | None:
    """Blocking topic prompt. None when cancelled or dismissed."""
    with ui.dialog() as dialog, ui.card().classes("w-96"):
        ui.label("Enter file topic/category:").classes("text-lg")
        field = ui.input(placeholder="General").classes("w-full")
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
            ui.button("OK", on_click=lambda: dialog.submit(field.value))
    try:
        return await dialog
    finally:
        dialog.delete()


async def confirm_delete(name: str) -> bool:
    with ui.dialog() as dialog, ui.card():
        ui.label(f"Delete {name}?")
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=lambda: dialog.submit(False)).props("flat")
            ui.button("Delete", on_click=lambda: dialog.submit(True)).props("color=negative")
    try:
        return bool(await dialog)
    finally:
        dialog.delete()


@ui.page("/")
async def chat_page() -> None:
    """Main chat page. Every browser tab gets its own conversation."""
    ui.add_head_html(CUSTOM_CSS)

    config = get_client_config()
    client = ServiceClient(config)
    rendered = False

    def refresh() -> None:
        if rendered:
            header_view.refresh()
            messages_view.refresh()
            library_view.refresh()

    library = DocumentLibrary(on_change=refresh)
    manager = SessionManager(client, config, on_change=refresh)
    upload_control: ui.upload | None = None

    def reset_upload() -> None:
        if upload_control is not None:
            upload_control.reset()

    uploader = UploadCoordinator(client, library, config, on_reset=reset_upload)
    deleter = DeleteCoordinator(client, library)

    async def teardown() -> None:
        logger.info(f"Browser disconnected, closing chat {manager.session.id}")
        await manager.aclose()
        await client.aclose()

    ui.context.client.on_disconnect(teardown)
    await manager.start_conversation()

    def render_turn(turn: Turn) -> None:
        is_user = turn.sender is Sender.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes(f"max-w-[75%] gap-1 px-4 py-3 {bubble}"):
                ui.label(turn.text).classes("message-text text-sm leading-relaxed")
                ui.label(turn.timestamp.astimezone().strftime("%I:%M %p")).classes(
                    "text-[10px] opacity-60"
                )

    @ui.refreshable
    def header_view() -> None:
        session = manager.session
        with ui.column().classes("items-end gap-0"):
            if session.id:
                ui.label(f"Chat ID: {session.id[:8].upper()}").classes(
                    "text-xs text-white/80 font-mono"
                )
            ui.label(_CONNECTION_LABELS[session.state]).classes("text-xs text-green-300")

    @ui.refreshable
    def messages_view() -> None:
        if not len(manager.log):
            with ui.column().classes("w-full h-64 items-center justify-center"):
                ui.icon("forum").classes("text-5xl text-slate-500")
                ui.label("Start a conversation").classes("text-lg text-slate-400")
        for turn in manager.turns:
            render_turn(turn)
        if manager.busy:
            ui.label("EduBot is thinking...").classes("text-slate-400 italic")

    @ui.refreshable
    def library_view() -> None:
        ui.label(f"Uploaded Files ({len(library)})").classes("text-white font-semibold")
        if not len(library):
            ui.label("No files uploaded").classes("text-slate-400")
            ui.label("Upload PDF files to enable Q&A features").classes("text-xs text-slate-500")
            return
        for entry in library:
            deleting = entry.status is DocumentStatus.DELETING
            with ui.row().classes(
                f"w-full doc-card p-3 items-start justify-between {'doc-deleting' if deleting else ''}"
            ):
                with ui.column().classes("gap-0 min-w-0"):
                    ui.label(entry.name).classes("text-white text-sm truncate")
                    ui.label(entry.subject).classes("text-xs text-slate-400")
                    ui.label(
                        f"{entry.size_label} · {entry.uploaded_at.strftime('%m/%d/%Y')}"
                    ).classes("text-xs text-slate-500")
                if deleting:
                    ui.spinner(size="sm")
                else:
                    ui.button(
                        icon="delete",
                        on_click=lambda _, doc_id=entry.id: delete_document(doc_id),
                    ).props("flat round dense color=grey")

    async def send_message() -> None:
        text = input_field.value
        if manager.busy or not (text or "").strip():
            return
        input_field.value = ""
        send_btn.disable()
        try:
            status = await manager.submit(text)
            if status is SubmitStatus.BUSY:
                ui.notify("Still answering your last question", type="warning")
        finally:
            send_btn.enable()
            input_field.run_method("focus")

    async def handle_upload(e: events.UploadEventArguments) -> None:
        selection = SelectedFile(e.file.name, e.file.size(), e.file.read)
        subject = await ask_subject() if uploader.check(selection, None) is None else None
        result = await uploader.upload(selection, subject)
        ui.notify(result.message, type="positive" if result.ok else "negative")

    async def delete_document(doc_id: str) -> None:
        result = await deleter.delete(doc_id, confirm_delete)
        if result.kind is DeleteResultKind.CANCELLED:
            return
        ui.notify(result.message, type="info" if result.removed else "negative")

    async def new_chat() -> None:
        await manager.start_conversation()

    # === UI Layout ===
    with ui.row().classes("w-full min-h-screen gap-0 no-wrap"):
        with ui.column().classes("w-80 sidebar p-6 gap-4 min-h-screen"):
            ui.label("EduBot").classes("text-xl font-bold text-white")
            ui.label("PDF + RAG").classes("text-sm text-slate-400")
            upload_control = (
                ui.upload(
                    label="Upload PDF File",
                    on_upload=handle_upload,
                    on_rejected=lambda: ui.notify(
                        f"📦 Files larger than {config.max_upload_mb} MB are not accepted.",
                        type="negative",
                    ),
                    max_file_size=config.max_upload_bytes,
                    auto_upload=True,
                )
                .props("accept=.pdf flat bordered")
                .classes("w-full")
            )
            with ui.column().classes("w-full gap-3"):
                library_view()

        with ui.column().classes("flex-grow gap-0").style("height: 100vh"):
            with ui.row().classes("w-full header px-6 py-4 items-center justify-between"):
                with ui.row().classes("items-center gap-3"):
                    ui.icon("smart_toy").classes("text-white text-3xl")
                    with ui.column().classes("gap-0"):
                        ui.label("EduBot Assistant").classes("text-lg font-semibold text-white")
                        ui.label("Ask about uploaded files or any general inquiry").classes(
                            "text-xs text-white/70"
                        )
                with ui.row().classes("items-center gap-3"):
                    header_view()
                    ui.button(icon="add", on_click=new_chat).props("flat round color=white")

            with ui.scroll_area().classes("flex-grow w-full"):
                with ui.column().classes("w-full max-w-4xl mx-auto p-6 gap-4"):
                    messages_view()

            with ui.row().classes("w-full p-4 gap-3 items-end no-wrap"):
                input_field = (
                    ui.textarea(placeholder="Ask me anything (Shift+Enter for new line)...")
                    .props("autogrow outlined dense rows=1 dark")
                    .classes("flex-grow")
                    .on("keydown.enter.exact.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    rendered = True
