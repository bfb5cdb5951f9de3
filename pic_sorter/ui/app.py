"""Main Tkinter application for PicSorter."""
import tkinter as tk
from tkinter import messagebox, ttk
import logging

from PIL import Image, ImageTk

from ..services import SortService, UserFacingError
from ..state import TabId

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "space: skip   Delete: delete   BackSpace / Ctrl+Z: undo   F2: rename   "
    "Tab: script   Ctrl+S: save   Esc: quit"
)


class PicSorterApp(tk.Tk):
    """Main application window."""

    def __init__(self, service: SortService):
        """
        Initialize the application.

        Args:
            service: Review session to drive
        """
        super().__init__()

        self.service = service
        self._photo = None
        self._last_image_path = None
        self._original_image = None

        self.setup_window()
        self.create_widgets()
        self.create_key_bindings()

        self.after(100, self.refresh)

    def setup_window(self):
        """Set up the main window."""
        self.title("PicSorter")
        self.geometry("1000x750")
        self.protocol("WM_DELETE_WINDOW", self.on_closing)

    def create_widgets(self):
        """Create the image view, script preview and status bar."""
        top = ttk.Frame(self)
        top.pack(side=tk.TOP, fill=tk.X, padx=5, pady=5)

        self.counter_label = ttk.Label(top, text="0 / 0")
        self.counter_label.pack(side=tk.LEFT)

        self.path_label = ttk.Label(top, text="")
        self.path_label.pack(side=tk.LEFT, padx=10)

        self.save_label = ttk.Label(top, text="not saved")
        self.save_label.pack(side=tk.RIGHT)

        self.body = ttk.Frame(self)
        self.body.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        self.image_canvas = tk.Canvas(self.body, background="#202020", highlightthickness=0)
        self.image_canvas.bind("<Configure>", lambda e: self.show_current_image())

        self.script_text = tk.Text(self.body, wrap=tk.NONE, font=("Courier", 10), state=tk.DISABLED)

        self.rename_label = ttk.Label(self, text="", font=("Courier", 11))

        bindings = "   ".join(
            f"{key}: {path}" for key, path in sorted(self.service.key_mapping.items())
        )
        self.bindings_label = ttk.Label(self, text=bindings or "No bindings")
        self.bindings_label.pack(side=tk.BOTTOM, fill=tk.X, padx=5)

        self.status_label = ttk.Label(self, text=HELP_TEXT)
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X, padx=5, pady=(0, 5))

    def create_key_bindings(self):
        """Create keyboard bindings."""
        # Every key goes through on_key so rename mode can take them over
        self.bind("<Key>", self.on_key)
        self.bind("<Control-z>", lambda e: self.decide(self.service.undo))
        self.bind("<Control-s>", lambda e: self.save())

        self.review_keys = {
            "space": lambda: self.decide(self.service.skip_current),
            "Delete": lambda: self.decide(self.service.delete_current),
            "BackSpace": lambda: self.decide(self.service.undo),
            "F2": self.begin_rename,
            "Tab": self.switch_tab,
            "Escape": self.on_closing,
            # Script preview scrolling
            "Up": lambda: self.scroll(self.service.scroll_up),
            "Down": lambda: self.scroll(self.service.scroll_down),
            "Left": lambda: self.scroll(self.service.scroll_left),
            "Right": lambda: self.scroll(self.service.scroll_right),
        }

    def run(self):
        """Start the Tk main loop."""
        self.mainloop()

    def _is_typing(self) -> bool:
        return self.service.state.rename.active

    def on_key(self, event):
        """Dispatch a keystroke to rename editing, a command or a bound move."""
        if self._is_typing():
            return self.on_rename_key(event)
        if event.state & 0x4:  # Control held
            return None

        command = self.review_keys.get(event.keysym)
        if command is not None:
            command()
            return "break"
        if event.char and event.char in self.service.key_mapping:
            self.decide(lambda: self.service.move_current(event.char))
            return "break"
        return None

    def run_action(self, action):
        try:
            action()
        except UserFacingError as e:
            messagebox.showerror("Error", str(e))
        self.refresh()

    def decide(self, action):
        if self._is_typing():
            return
        self.run_action(action)

    def scroll(self, action):
        if self.service.current_tab is TabId.SCRIPT:
            action()
            self.show_script()

    def switch_tab(self):
        self.service.switch_tab()
        self.refresh()

    def begin_rename(self):
        """Open the rename line seeded with the current file name."""
        if not self.service.begin_rename():
            return
        self.rename_label.pack(side=tk.BOTTOM, fill=tk.X, padx=5, pady=5, before=self.bindings_label)
        self.update_rename_label()

    def on_rename_key(self, event):
        """Edit the rename buffer; Return commits, Escape cancels."""
        if event.keysym == "Return":
            self.commit_rename()
        elif event.keysym == "Escape":
            self.cancel_rename()
        elif self.service.state.rename.edit(event.keysym, event.char):
            self.update_rename_label()
        return "break"

    def update_rename_label(self):
        self.rename_label.config(text=f"Rename: {self.service.state.rename.display()}")

    def commit_rename(self):
        try:
            self.service.commit_rename()
        except UserFacingError as e:
            messagebox.showerror("Error", str(e))
            return
        self._close_rename()

    def cancel_rename(self):
        self.service.cancel_rename()
        self._close_rename()

    def _close_rename(self):
        self.rename_label.pack_forget()
        self.refresh()

    def save(self):
        try:
            self.service.save()
        except UserFacingError as e:
            messagebox.showerror("Error", str(e))
        self.refresh()
        return "break"

    def refresh(self):
        """Redraw everything from the session state."""
        self.update_counter()
        if self.service.current_tab is TabId.SCRIPT:
            self.image_canvas.pack_forget()
            self.script_text.pack(fill=tk.BOTH, expand=True)
            self.show_script()
        else:
            self.script_text.pack_forget()
            self.image_canvas.pack(fill=tk.BOTH, expand=True)
            self.show_current_image()

    def update_counter(self):
        """Update the counter, path and save labels."""
        done, total = self.service.progress()
        self.counter_label.config(text=f"{min(done + 1, total)} / {total}")

        current = self.service.current_image()
        if current is None:
            self.path_label.config(text="Review complete")
        elif self.service.pending_rename:
            self.path_label.config(text=f"{current} -> {self.service.pending_rename}")
        else:
            self.path_label.config(text=str(current))

        elapsed = self.service.seconds_since_save()
        if elapsed is None:
            self.save_label.config(text="not saved")
        else:
            marker = "*" if self.service.has_unsaved_changes else ""
            self.save_label.config(text=f"saved {int(elapsed)}s ago{marker}")

    def show_script(self):
        """Show the script preview at the current scroll offset."""
        row, column = self.service.state.script_offset
        self.script_text.config(state=tk.NORMAL)
        self.script_text.delete("1.0", tk.END)
        self.script_text.insert("1.0", self.service.script_text())
        self.script_text.config(state=tk.DISABLED)
        self.script_text.yview_moveto(0)
        self.script_text.xview_moveto(0)
        self.script_text.yview_scroll(row, "units")
        self.script_text.xview_scroll(column, "units")

    def show_current_image(self):
        """Display the current image fitted to the canvas."""
        if self.service.current_tab is not TabId.MAIN:
            return

        current = self.service.current_image()
        self.image_canvas.delete("all")
        canvas_width = self.image_canvas.winfo_width()
        canvas_height = self.image_canvas.winfo_height()

        if current is None:
            self.image_canvas.create_text(
                canvas_width // 2,
                canvas_height // 2,
                text="All images reviewed.\n\nCtrl+S saves the script, Esc quits.",
                font=("Arial", 14),
                fill="gray",
                justify=tk.CENTER
            )
            return

        if canvas_width <= 1 or canvas_height <= 1:
            # Canvas not ready yet, try again
            self.after(100, self.show_current_image)
            return

        try:
            if self._last_image_path != current:
                with Image.open(current) as image:
                    self._original_image = image.copy()
                self._last_image_path = current

            image_width, image_height = self._original_image.size
            scale = min(canvas_width / image_width, canvas_height / image_height)
            new_width = max(1, int(image_width * scale))
            new_height = max(1, int(image_height * scale))
            resized_image = self._original_image.resize((new_width, new_height), Image.LANCZOS)

            self._photo = ImageTk.PhotoImage(resized_image)
            self.image_canvas.create_image(
                canvas_width // 2, canvas_height // 2, anchor=tk.CENTER, image=self._photo
            )
        except Exception as e:
            logger.error(f"Error showing image {current}: {e}")
            self.image_canvas.create_text(
                canvas_width // 2,
                canvas_height // 2,
                text=f"Cannot display {current.name}",
                font=("Arial", 14),
                fill="gray"
            )

    def on_closing(self):
        """Offer to save unsaved decisions, then close."""
        if self._is_typing():
            return
        if self.service.has_unsaved_changes:
            answer = messagebox.askyesnocancel("Quit", "Write the script before quitting?")
            if answer is None:
                return
            if answer:
                try:
                    self.service.save()
                except UserFacingError as e:
                    messagebox.showerror("Error", str(e))
                    return
        self.destroy()
