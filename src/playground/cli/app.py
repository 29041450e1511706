"""Main CLI application using Typer."""
import asyncio
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..assistant import SessionManager, SessionState
from ..config import CONVERSATIONS_KEY
from ..conversations import ConversationStore
from ..events import EventBus
from ..images import ImageQuality, ImageSettings, ImageSize, ImageStudio, ImageStyle
from ..llm import MessageRole
from ..logging_setup import setup_logging
from ..notes import LocalNoteStore, Note, NoteNotFoundError
from ..quotes import CompletionQuoteGateway, QuoteService, QuoteType
from ..todos import LocalTodoStore, Todo, TodoNotFoundError, TodoPriority
from ..transcription import AudioPayload
from ..videos import Video, VideoBrowser
from ..voice import SoundcardAudioInput, VoiceCapturePipeline, VoiceNoteConverter
from .providers import (
    get_chat_model,
    get_completion_gateway,
    get_image_gateway,
    get_storage,
    get_transcription_gateway,
    get_user_id,
    get_youtube_client,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="playground",
    help="Personal AI playground: assistant chat, voice notes, images, quotes and videos",
    no_args_is_help=True,
    add_completion=True,
)
conversations_app = typer.Typer(help="Manage saved assistant conversations", no_args_is_help=True)
image_app = typer.Typer(help="Generate images and manage the image history", no_args_is_help=True)
notes_app = typer.Typer(help="Manage saved notes", no_args_is_help=True)
todos_app = typer.Typer(help="Manage the todo list", no_args_is_help=True)
videos_app = typer.Typer(help="Search and browse YouTube videos", no_args_is_help=True)
app.add_typer(conversations_app, name="conversations")
app.add_typer(image_app, name="image")
app.add_typer(notes_app, name="notes")
app.add_typer(todos_app, name="todos")
app.add_typer(videos_app, name="videos")

# Console for rich output
console = Console()

_AUDIO_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
    ".flac": "audio/flac",
}


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (default: PLAYGROUND_LOG_LEVEL or WARNING)"
    )
):
    """Personal AI playground."""
    try:
        setup_logging(log_level)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def chat(
    new: bool = typer.Option(
        False,
        "--new",
        "-n",
        help="Start a new conversation instead of resuming the latest one"
    )
):
    """Chat with the assistant; conversations are saved automatically."""
    async def _chat():
        gateway = get_completion_gateway(console)
        storage = get_storage()
        try:
            await storage.connect()
            store = ConversationStore(storage, CONVERSATIONS_KEY)
            session = SessionManager(gateway, store, model=get_chat_model())
            await session.initialize(resume_latest=not new)

            console.print("[bold cyan]Playground Assistant[/bold cyan]")
            console.print("[dim]Type 'new' for a new conversation, 'exit', 'quit', or 'q' to leave[/dim]\n")
            for message in session.messages:
                _print_chat_message(message.role, message.content)

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                command = user_input.strip().lower()
                if not command:
                    continue
                if command in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break
                if command == "new":
                    session.start_new_conversation()
                    console.print("[dim]Started a new conversation[/dim]\n")
                    continue

                with console.status("[dim]Thinking...[/dim]"):
                    reply = await session.send_message(user_input)

                if session.state is SessionState.ERROR:
                    console.print(f"[red]{session.error}[/red]\n")
                elif reply is not None:
                    _print_chat_message(reply.role, reply.content)
        finally:
            await storage.disconnect()
            await gateway.close()

    asyncio.run(_chat())


def _print_chat_message(role: str, content: str) -> None:
    if role == MessageRole.USER:
        console.print(f"[bold yellow]You:[/bold yellow] {content}")
    else:
        console.print(f"[bold green]Assistant:[/bold green] {content}\n")


@conversations_app.command("list")
def conversations_list():
    """List saved conversations, most recently updated first."""
    async def _list():
        storage = get_storage()
        async with storage:
            store = ConversationStore(storage, CONVERSATIONS_KEY)
            await store.load()
            conversations = store.list()

        if not conversations:
            console.print("[yellow]No saved conversations[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Title")
        table.add_column("Messages", justify="right")
        table.add_column("Updated")
        for conversation in conversations:
            table.add_row(
                conversation.id,
                conversation.title,
                str(len(conversation.messages)),
                conversation.updated_at.strftime("%Y-%m-%d %H:%M"),
            )
        console.print(table)

    asyncio.run(_list())


@conversations_app.command("show")
def conversations_show(
    conversation_id: str = typer.Argument(..., help="Conversation ID")
):
    """Print every message of a saved conversation."""
    async def _show():
        storage = get_storage()
        async with storage:
            store = ConversationStore(storage, CONVERSATIONS_KEY)
            await store.load()
            conversation = store.get(conversation_id)

        if conversation is None:
            console.print(f"[red]Conversation not found: {conversation_id}[/red]")
            raise typer.Exit(code=1)

        console.print(f"[bold cyan]{conversation.title}[/bold cyan]\n")
        for message in conversation.messages:
            _print_chat_message(message.role, message.content)

    asyncio.run(_show())


@conversations_app.command("delete")
def conversations_delete(
    conversation_id: str = typer.Argument(..., help="Conversation ID")
):
    """Delete one saved conversation."""
    async def _delete():
        storage = get_storage()
        async with storage:
            store = ConversationStore(storage, CONVERSATIONS_KEY)
            await store.load()
            if conversation_id not in store:
                console.print(f"[yellow]No conversation with ID {conversation_id}[/yellow]")
                return
            await store.remove(conversation_id)
        console.print("[green]Conversation deleted[/green]")

    asyncio.run(_delete())


@conversations_app.command("clear")
def conversations_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")
):
    """Delete all saved conversations."""
    if not yes and not typer.confirm("Delete all saved conversations?"):
        console.print("[dim]Aborted.[/dim]")
        return

    async def _clear():
        storage = get_storage()
        async with storage:
            store = ConversationStore(storage, CONVERSATIONS_KEY)
            await store.clear()
        console.print("[green]All conversations deleted[/green]")

    asyncio.run(_clear())


@app.command()
def quote(
    category: QuoteType = typer.Option(
        QuoteType.DAILY,
        "--type",
        "-t",
        help="Quote type"
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh",
        "-r",
        help="Ignore today's cached daily quote"
    )
):
    """Show a motivational quote (the daily quote is cached for the day)."""
    async def _quote():
        completion = get_completion_gateway(console)
        storage = get_storage()
        try:
            await storage.connect()
            service = QuoteService(CompletionQuoteGateway(completion), storage)
            if category is QuoteType.DAILY and not refresh:
                result = await service.get_daily_quote()
            else:
                result = await service.refresh_quote(category)
        finally:
            await storage.disconnect()
            await completion.close()

        if result is None:
            console.print(f"[red]{service.error or 'No quote available'}[/red]")
            raise typer.Exit(code=1)

        console.print(Panel(
            f"[italic]\"{result.quote}\"[/italic]\n\n[dim]- {result.attribution}[/dim]",
            title=f"[bold cyan]{result.type.value.title()} quote[/bold cyan]",
            border_style="cyan",
        ))

    asyncio.run(_quote())


@image_app.command("generate")
def image_generate(
    prompt: str = typer.Argument(..., help="Description of the image"),
    size: ImageSize = typer.Option(ImageSize.SQUARE, "--size", "-s", help="Image size"),
    quality: ImageQuality = typer.Option(ImageQuality.STANDARD, "--quality", "-q", help="Image quality"),
    style: ImageStyle = typer.Option(ImageStyle.VIVID, "--style", help="Image style"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Directory to download the image into"
    )
):
    """Generate an image and add it to the history."""
    async def _generate():
        gateway = get_image_gateway(console)
        storage = get_storage()
        try:
            await storage.connect()
            studio = ImageStudio(gateway, storage)
            await studio.load_history()
            with console.status("[dim]Generating image...[/dim]"):
                image = await studio.generate_image(
                    prompt,
                    ImageSettings(size=size, quality=quality, style=style),
                )
            if image is None:
                console.print(f"[red]{studio.error}[/red]")
                raise typer.Exit(code=1)

            console.print(f"[green]Image generated:[/green] {image.image_url}")
            if image.revised:
                console.print(f"[dim]Revised prompt: {image.revised_prompt}[/dim]")

            if output is not None:
                try:
                    path = await studio.download_image(image, output)
                except RuntimeError as e:
                    console.print(f"[red]{e}[/red]")
                    raise typer.Exit(code=1)
                console.print(f"[green]Saved to {path}[/green]")
        finally:
            await storage.disconnect()
            await gateway.close()

    asyncio.run(_generate())


@image_app.command("history")
def image_history():
    """List previously generated images, newest first."""
    async def _history():
        storage = get_storage()
        async with storage:
            studio = ImageStudio(None, storage)
            await studio.load_history()

        if not studio.images:
            console.print("[yellow]No generated images[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Created")
        table.add_column("Prompt")
        table.add_column("Settings", style="dim")
        table.add_column("URL", overflow="fold")
        for image in studio.images:
            table.add_row(
                image.timestamp.strftime("%Y-%m-%d %H:%M"),
                image.original_prompt,
                f"{image.settings.size} {image.settings.quality} {image.settings.style}",
                image.image_url,
            )
        console.print(table)

    asyncio.run(_history())


@image_app.command("clear")
def image_clear():
    """Delete the image history."""
    async def _clear():
        storage = get_storage()
        async with storage:
            studio = ImageStudio(None, storage)
            await studio.clear_history()
        console.print("[green]Image history cleared[/green]")

    asyncio.run(_clear())


@app.command()
def transcribe(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Audio file to transcribe"
    )
):
    """Transcribe an audio file."""
    async def _transcribe():
        gateway = get_transcription_gateway(console)
        payload = AudioPayload(
            data=file.read_bytes(),
            mime_type=_AUDIO_TYPES.get(file.suffix.lower(), "application/octet-stream"),
            filename=file.name,
        )
        try:
            with console.status("[dim]Transcribing...[/dim]"):
                text = await gateway.transcribe(payload)
        except Exception as e:
            console.print(f"[red]Error: {getattr(e, 'user_message', e)}[/red]")
            raise typer.Exit(code=1)
        finally:
            await gateway.close()

        console.print(text or "[yellow]No speech detected[/yellow]")

    asyncio.run(_transcribe())


@app.command()
def record():
    """Record from the microphone, transcribe, and save the result as a voice note."""
    async def _record():
        audio_input = SoundcardAudioInput()
        if not audio_input.is_supported:
            console.print("[red]Audio recording is not supported on this system[/red]")
            raise typer.Exit(code=1)

        transcriber = get_transcription_gateway(console)
        storage = get_storage()
        events = EventBus()
        try:
            await storage.connect()
            pipeline = VoiceCapturePipeline(audio_input, transcriber, events)
            converter = VoiceNoteConverter(LocalNoteStore(storage), get_user_id(), events)

            if not await pipeline.start_recording():
                console.print(f"[red]{pipeline.error}[/red]")
                raise typer.Exit(code=1)

            console.print("[bold red]Recording...[/bold red] [dim]press Enter to stop[/dim]")
            try:
                await asyncio.to_thread(input)
            except (KeyboardInterrupt, EOFError):
                pass

            with console.status("[dim]Transcribing...[/dim]"):
                recording = await pipeline.stop_recording()

            if recording is None:
                return
            if pipeline.error:
                console.print(f"[yellow]{pipeline.error}[/yellow]")
            console.print(Panel(
                recording.transcript,
                title=f"[bold cyan]Recording ({recording.duration:.1f}s)[/bold cyan]",
                border_style="cyan",
            ))
            if converter.error:
                console.print(f"[red]{converter.error}[/red]")
            converter.close()
        finally:
            await storage.disconnect()
            await transcriber.close()

    asyncio.run(_record())


@notes_app.command("list")
def notes_list(
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of notes to show")
):
    """List saved notes, newest first."""
    async def _notes():
        storage = get_storage()
        async with storage:
            saved = await LocalNoteStore(storage).list_notes(get_user_id())

        if not saved:
            console.print("[yellow]No notes[/yellow]")
            return

        for note in saved[:limit]:
            tags = f"  [dim]{', '.join(note.tags)}[/dim]" if note.tags else ""
            console.print(Panel(
                note.content,
                title=f"[bold cyan]{note.title}[/bold cyan]{tags}",
                subtitle=f"[dim]{note.id}[/dim]",
                border_style="blue" if note.is_voice_note else "cyan",
            ))

    asyncio.run(_notes())


@notes_app.command("add")
def notes_add(
    title: str = typer.Argument(..., help="Note title"),
    content: str = typer.Argument(..., help="Note text"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)")
):
    """Save a new note."""
    async def _add():
        storage = get_storage()
        async with storage:
            note = Note(user_id=get_user_id(), title=title, content=content, tags=tag)
            await LocalNoteStore(storage).add_note(note)
        console.print(f"[green]Note saved[/green] [dim]{note.id}[/dim]")

    asyncio.run(_add())


@notes_app.command("edit")
def notes_edit(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    content: str | None = typer.Option(None, "--content", help="New text"),
    tag: list[str] | None = typer.Option(None, "--tag", "-t", help="Replace tags (repeatable)")
):
    """Change a note's title, text or tags."""
    async def _edit():
        storage = get_storage()
        async with storage:
            try:
                await LocalNoteStore(storage).update_note(
                    get_user_id(), note_id, title=title, content=content, tags=tag or None
                )
            except NoteNotFoundError:
                console.print(f"[yellow]No note with ID {note_id}[/yellow]")
                return
        console.print("[green]Note updated[/green]")

    asyncio.run(_edit())


@notes_app.command("delete")
def notes_delete(
    note_id: str = typer.Argument(..., help="Note ID")
):
    """Delete a note."""
    async def _delete():
        storage = get_storage()
        async with storage:
            await LocalNoteStore(storage).delete_note(get_user_id(), note_id)
        console.print("[green]Note deleted[/green]")

    asyncio.run(_delete())


@todos_app.command("list")
def todos_list():
    """List todos, newest first."""
    async def _todos():
        storage = get_storage()
        async with storage:
            saved = await LocalTodoStore(storage).list_todos(get_user_id())

        if not saved:
            console.print("[yellow]No todos[/yellow]")
            return

        table = Table(title="Todos")
        table.add_column("ID", style="dim")
        table.add_column("Done")
        table.add_column("Title", style="cyan")
        table.add_column("Priority")
        table.add_column("Due")
        for todo in saved:
            table.add_row(
                todo.id,
                "[green]x[/green]" if todo.completed else "",
                todo.title,
                todo.priority.value,
                todo.due_date.isoformat() if todo.due_date else "",
            )
        console.print(table)

    asyncio.run(_todos())


@todos_app.command("add")
def todos_add(
    title: str = typer.Argument(..., help="What needs doing"),
    description: str = typer.Option("", "--description", "-d", help="Details"),
    priority: TodoPriority = typer.Option(TodoPriority.MEDIUM, "--priority", "-p", help="Priority"),
    due: datetime | None = typer.Option(None, "--due", formats=["%Y-%m-%d"], help="Due date (YYYY-MM-DD)")
):
    """Add a todo."""
    async def _add():
        storage = get_storage()
        async with storage:
            todo = Todo(
                user_id=get_user_id(),
                title=title,
                description=description,
                priority=priority,
                due_date=due.date() if due else None,
            )
            await LocalTodoStore(storage).add_todo(todo)
        console.print(f"[green]Todo added[/green] [dim]{todo.id}[/dim]")

    if not title.strip():
        console.print("[red]Error: Todo title is required[/red]")
        raise typer.Exit(1)
    asyncio.run(_add())


@todos_app.command("toggle")
def todos_toggle(
    todo_id: str = typer.Argument(..., help="Todo ID")
):
    """Mark a todo done, or not done again."""
    async def _toggle():
        storage = get_storage()
        async with storage:
            try:
                todo = await LocalTodoStore(storage).toggle_complete(get_user_id(), todo_id)
            except TodoNotFoundError:
                console.print(f"[yellow]No todo with ID {todo_id}[/yellow]")
                return
        state = "done" if todo.completed else "not done"
        console.print(f"[green]{todo.title}[/green] marked {state}")

    asyncio.run(_toggle())


@todos_app.command("delete")
def todos_delete(
    todo_id: str = typer.Argument(..., help="Todo ID")
):
    """Delete a todo."""
    async def _delete():
        storage = get_storage()
        async with storage:
            await LocalTodoStore(storage).delete_todo(get_user_id(), todo_id)
        console.print("[green]Todo deleted[/green]")

    asyncio.run(_delete())


@videos_app.command("search")
def videos_search(
    query: str = typer.Argument(..., help="Search query"),
    limit: int = typer.Option(12, "--limit", "-n", help="Results per page"),
    pages: int = typer.Option(1, "--pages", "-p", help="Number of pages to fetch")
):
    """Search YouTube videos."""
    async def _search():
        client = get_youtube_client(console)
        browser = VideoBrowser(client)
        try:
            await browser.search_videos(query, max_results=limit)
            for _ in range(pages - 1):
                if browser.next_page_token is None:
                    break
                await browser.load_more_videos(query)
        finally:
            if client is not None:
                await client.close()

        _print_videos(browser, f"Results for '{query}'")

    asyncio.run(_search())


@videos_app.command("popular")
def videos_popular(
    limit: int = typer.Option(12, "--limit", "-n", help="Number of videos"),
    region: str = typer.Option("US", "--region", "-r", help="Region code")
):
    """Show currently popular YouTube videos."""
    async def _popular():
        client = get_youtube_client(console)
        browser = VideoBrowser(client)
        try:
            await browser.get_popular_videos(max_results=limit, region_code=region)
        finally:
            if client is not None:
                await client.close()

        _print_videos(browser, "Popular videos")

    asyncio.run(_popular())


def _print_videos(browser: VideoBrowser, title: str) -> None:
    if browser.error:
        console.print(f"[red]{browser.error}[/red]")
        raise typer.Exit(code=1)
    if not browser.videos:
        console.print("[yellow]No videos found[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Title")
    table.add_column("Channel", style="dim")
    table.add_column("Views", justify="right")
    table.add_column("URL", overflow="fold")
    for video in browser.videos:
        table.add_row(video.title, video.channel_title, _views(video), video.url)
    console.print(table)


def _views(video: Video) -> str:
    if video.statistics is None or video.statistics.view_count is None:
        return "-"
    return f"{video.statistics.view_count:,}"


if __name__ == "__main__":
    app()
