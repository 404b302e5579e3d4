#!/usr/bin/env python
"""
Photo Puzzle GUI

A game-styled Tkinter front end: pick a photo, memorise it during the
countdown, then rebuild it from the shuffled tiles.

Controls:
    click a tray tile, then a board cell    place it
    click a placed tile, then another cell  move it
    double-click a tray tile                place it on the first empty cell
    right-click a placed tile               send it back to the tray
"""

import tkinter as tk
from tkinter import ttk, filedialog
from PIL import Image, ImageTk
import os

from core.config import PuzzleConfig
from core.errors import (
    BoardFull,
    CellOccupied,
    OutOfBounds,
    PuzzleError,
    ResetRequired,
    SessionFinished,
)
from core.image_utils import resize_image
from engine import Placed, Removed, Reset, SessionState, StateChanged
from interaction.audio import CLICK
from pipeline import Phase, PuzzleSession


# Color scheme
COLORS = {
    'bg_dark': '#1a1a2e',
    'bg_medium': '#16213e',
    'bg_light': '#0f3460',
    'accent': '#e94560',
    'accent_hover': '#ff6b6b',
    'text': '#eaeaea',
    'text_dim': '#a0a0a0',
    'success': '#4ecca3',
    'error': '#ff6b6b',
    'countdown': '#f9d342',
}

CELL_SIZE = 140
THUMB_SIZE = 100
PREVIEW_SIZE = 420

# Status line for each kind of refused move
REJECTION_MESSAGES = [
    (CellOccupied, "⛔ That cell is taken"),
    (OutOfBounds, "⛔ That cell is off the board"),
    (BoardFull, "⛔ The board is full"),
    (ResetRequired, "⚠ Press Try again to reshuffle the tiles"),
    (SessionFinished, "✅ Already solved, choose a new photo"),
]


def rejection_message(error):
    for error_type, message in REJECTION_MESSAGES:
        if isinstance(error, error_type):
            return message
    return f"⛔ {error}"


def to_photo(pixels, width=None, height=None):
    """numpy RGB array -> ImageTk.PhotoImage, optionally resized."""
    if width is not None or height is not None:
        pixels = resize_image(pixels, width=width, height=height)
    return ImageTk.PhotoImage(Image.fromarray(pixels))


class PhotoPuzzleGUI:
    def __init__(self, root, config=None):
        self.root = root
        self.root.title("🧩 Photo Puzzle")
        self.root.geometry("1000x750")
        self.root.minsize(800, 600)
        self.root.configure(bg=COLORS['bg_dark'])

        self.config = config or PuzzleConfig()
        self.image_path = None
        self.session = None
        self.selected_tile_id = None

        # PhotoImage references must outlive the widgets showing them
        self.photos = {}
        self.preview_photo = None

        self._setup_styles()
        self._build_ui()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _setup_styles(self):
        """Configure ttk styles for game-like appearance."""
        style = ttk.Style()
        style.theme_use('clam')

        style.configure('Dark.TFrame', background=COLORS['bg_dark'])

        style.configure('Game.TButton',
                        font=('Segoe UI', 11, 'bold'),
                        padding=(20, 12),
                        background=COLORS['accent'],
                        foreground='white')
        style.map('Game.TButton',
                  background=[('active', COLORS['accent_hover']),
                              ('disabled', '#555555')])

        style.configure('Secondary.TButton',
                        font=('Segoe UI', 10),
                        padding=(15, 10),
                        background=COLORS['bg_light'],
                        foreground='white')
        style.map('Secondary.TButton',
                  background=[('active', COLORS['bg_medium'])])

        # name -> (font, foreground) for labels on the dark background
        labels = {
            'Title.TLabel': (('Segoe UI', 24, 'bold'), COLORS['text']),
            'Subtitle.TLabel': (('Segoe UI', 11), COLORS['text_dim']),
            'File.TLabel': (('Segoe UI', 10), COLORS['accent']),
        }
        for name, (font, fg) in labels.items():
            style.configure(name, font=font, background=COLORS['bg_dark'], foreground=fg)

    def _build_ui(self):
        main = ttk.Frame(self.root, style='Dark.TFrame', padding=20)
        main.pack(fill=tk.BOTH, expand=True)

        # Header
        header = ttk.Frame(main, style='Dark.TFrame')
        header.pack(fill=tk.X, pady=(0, 20))

        ttk.Label(header, text="🧩 Photo Puzzle", style='Title.TLabel').pack(side=tk.LEFT)
        ttk.Label(header, text="Pick a photo, remember it, rebuild it!",
                  style='Subtitle.TLabel').pack(side=tk.LEFT, padx=(20, 0), pady=(8, 0))

        # Controls row
        ctrl = ttk.Frame(main, style='Dark.TFrame')
        ctrl.pack(fill=tk.X, pady=(0, 15))

        self.select_btn = ttk.Button(ctrl, text="📁 Choose Photo",
                                     style='Game.TButton', command=self._select_image)
        self.select_btn.pack(side=tk.LEFT, padx=(0, 10))

        self.skip_btn = ttk.Button(ctrl, text="⏭ Skip Preview",
                                   style='Secondary.TButton', command=self._skip_preview,
                                   state=tk.DISABLED)
        self.skip_btn.pack(side=tk.LEFT)

        self.file_label = ttk.Label(ctrl, text="No photo selected", style='File.TLabel')
        self.file_label.pack(side=tk.RIGHT)

        # Content area: one screen at a time
        self.content = tk.Frame(main, bg=COLORS['bg_medium'], highlightthickness=2,
                                highlightbackground=COLORS['bg_light'])
        self.content.pack(fill=tk.BOTH, expand=True)

        self.placeholder = tk.Label(self.content, text="Your puzzle will appear here",
                                    font=('Segoe UI', 11), bg=COLORS['bg_medium'],
                                    fg=COLORS['text_dim'])
        self.placeholder.pack(expand=True)

        # Status bar
        status_frame = tk.Frame(main, bg=COLORS['bg_medium'], height=40)
        status_frame.pack(fill=tk.X, pady=(15, 0))
        status_frame.pack_propagate(False)

        self.status_label = tk.Label(status_frame, text="Choose a photo to begin!",
                                     font=('Segoe UI', 10), bg=COLORS['bg_medium'],
                                     fg=COLORS['text'], anchor=tk.W, padx=15)
        self.status_label.pack(fill=tk.BOTH, expand=True)

    def _set_status(self, msg, color=None):
        self.status_label.config(text=msg, fg=color or COLORS['text'])

    def _clear_content(self):
        for child in self.content.winfo_children():
            child.destroy()

    # ------------------------------------------------------------------
    # Photo selection and preview
    # ------------------------------------------------------------------

    def _select_image(self):
        filetypes = [("Image files", "*.jpg *.jpeg *.png *.bmp"), ("All files", "*.*")]
        path = filedialog.askopenfilename(title="Choose a Photo", filetypes=filetypes)
        if path:
            self._start_session(path)

    def _start_session(self, path):
        self._end_session()

        try:
            session = PuzzleSession(path, self.config, scheduler=self.root,
                                    play_sound=self._play_sound)
        except PuzzleError as e:
            self._set_status(f"❌ Cannot start puzzle: {e}", COLORS['error'])
            return

        self.image_path = path
        self.session = session
        self.file_label.config(text=f"📄 {os.path.basename(path)}")

        session.on_phase_change = self._on_phase_change
        session.on_countdown_tick = self._on_countdown_tick
        session.on_highlight = lambda cell: self._refresh_board()
        session.engine.subscribe(self._on_engine_event)

        self._show_preview()
        self.skip_btn.config(state=tk.NORMAL)
        session.start_preview()

    def _end_session(self):
        if self.session is not None:
            self.session.close()
            self.session = None
        self.selected_tile_id = None
        self.photos = {}
        self.skip_btn.config(state=tk.DISABLED)

    def _show_preview(self):
        self._clear_content()

        tk.Label(self.content, text="Remember this photo!", font=('Segoe UI', 18, 'bold'),
                 bg=COLORS['bg_medium'], fg=COLORS['text']).pack(pady=(15, 10))

        image = self.session.image
        h, w = image.shape[:2]
        if w >= h:
            self.preview_photo = to_photo(image, width=PREVIEW_SIZE)
        else:
            self.preview_photo = to_photo(image, height=PREVIEW_SIZE)
        tk.Label(self.content, image=self.preview_photo, bg=COLORS['bg_medium']).pack()

        self.countdown_label = tk.Label(self.content, text=str(self.config.countdown_seconds),
                                        font=('Segoe UI', 48, 'bold'),
                                        bg=COLORS['bg_medium'], fg=COLORS['countdown'])
        self.countdown_label.pack(pady=10)
        self._set_status("👀 Memorise the photo...", COLORS['countdown'])

    def _skip_preview(self):
        if self.session is not None:
            self.session.skip_preview()

    def _on_countdown_tick(self, remaining):
        self.countdown_label.config(text=str(max(remaining, 0)))

    def _on_phase_change(self, phase):
        if phase is Phase.PUZZLE:
            self.skip_btn.config(state=tk.DISABLED)
            self.preview_photo = None
            self._show_puzzle()

    # ------------------------------------------------------------------
    # Puzzle screen
    # ------------------------------------------------------------------

    def _show_puzzle(self):
        self._clear_content()
        engine = self.session.engine

        self.photos = {
            tile.id: (to_photo(tile.image, width=THUMB_SIZE), to_photo(tile.image, width=CELL_SIZE))
            for tile in engine.tiles
        }

        # Left: tray
        tray_outer = tk.Frame(self.content, bg=COLORS['bg_medium'])
        tray_outer.pack(side=tk.LEFT, fill=tk.Y, padx=(10, 0), pady=10)

        self.tray_canvas = tk.Canvas(tray_outer, width=THUMB_SIZE + 24, bg=COLORS['bg_dark'],
                                     highlightthickness=0)
        scrollbar = ttk.Scrollbar(tray_outer, orient=tk.VERTICAL, command=self.tray_canvas.yview)
        self.tray_canvas.configure(yscrollcommand=scrollbar.set)
        self.tray_canvas.pack(side=tk.LEFT, fill=tk.Y)
        scrollbar.pack(side=tk.LEFT, fill=tk.Y)

        self.tray_frame = tk.Frame(self.tray_canvas, bg=COLORS['bg_dark'])
        self.tray_canvas.create_window((0, 0), window=self.tray_frame, anchor=tk.NW)
        self.tray_frame.bind("<Configure>", lambda e: self.tray_canvas.configure(
            scrollregion=self.tray_canvas.bbox("all")))

        # Right: board
        board_frame = tk.Frame(self.content, bg=COLORS['bg_medium'])
        board_frame.pack(side=tk.LEFT, expand=True, padx=10, pady=10)

        tile_h, tile_w = engine.tiles[0].image.shape[:2]
        cell_h = max(1, int(CELL_SIZE * tile_h / tile_w))
        self.blank_photo = ImageTk.PhotoImage(Image.new("RGB", (CELL_SIZE, cell_h),
                                                        COLORS['bg_light']))

        self.cell_labels = {}
        for (row, col), _ in engine.cells():
            label = tk.Label(board_frame, image=self.blank_photo, bg=COLORS['bg_light'],
                             bd=0, highlightthickness=3, highlightbackground=COLORS['bg_light'])
            label.grid(row=row, column=col, padx=4, pady=4)
            label.bind("<Button-1>", lambda e, r=row, c=col: self._on_cell_click(r, c))
            label.bind("<Button-3>", lambda e, r=row, c=col: self._on_cell_right_click(r, c))
            self.cell_labels[(row, col)] = label

        self._refresh_tray()
        self._refresh_board()
        self._set_status("🧩 Place the tiles on the board")

    def _refresh_tray(self):
        for child in self.tray_frame.winfo_children():
            child.destroy()

        for tile in self.session.engine.tray:
            selected = tile.id == self.selected_tile_id
            label = tk.Label(self.tray_frame, image=self.photos[tile.id][0], bd=0,
                             bg=COLORS['bg_dark'], highlightthickness=3,
                             highlightbackground=COLORS['accent'] if selected else COLORS['bg_dark'])
            label.pack(padx=6, pady=4)
            label.bind("<Button-1>", lambda e, tid=tile.id: self._on_tray_click(tid))
            label.bind("<Double-Button-1>", lambda e, tid=tile.id: self._on_tray_double_click(tid))

    def _refresh_board(self):
        if self.session is None or self.session.phase is not Phase.PUZZLE:
            return
        highlighted = self.session.highlighted_cell

        for (row, col), tile in self.session.engine.cells():
            label = self.cell_labels[(row, col)]
            photo = self.blank_photo if tile is None else self.photos[tile.id][1]
            if (row, col) == highlighted:
                border = COLORS['error']
            elif tile is not None and tile.id == self.selected_tile_id:
                border = COLORS['accent']
            else:
                border = COLORS['bg_light']
            label.config(image=photo, highlightbackground=border)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _on_tray_click(self, tile_id):
        self.selected_tile_id = None if self.selected_tile_id == tile_id else tile_id
        self._refresh_tray()
        self._refresh_board()

    def _on_tray_double_click(self, tile_id):
        self.selected_tile_id = None
        self._try_move(lambda: self.session.engine.place_first_empty(tile_id))

    def _on_cell_click(self, row, col):
        engine = self.session.engine
        tile = engine.tile_at(row, col)

        if self.selected_tile_id is None:
            if tile is not None:
                # pick up a placed tile
                self.selected_tile_id = tile.id
                self._refresh_board()
            return

        if tile is not None and tile.id == self.selected_tile_id:
            self.selected_tile_id = None
            self._refresh_board()
            return

        tile_id = self.selected_tile_id
        self._try_move(lambda: engine.place(tile_id, row, col))

    def _on_cell_right_click(self, row, col):
        engine = self.session.engine
        tile = engine.tile_at(row, col)
        if tile is not None:
            self._try_move(lambda: engine.remove(tile.id))

    def _try_move(self, move):
        try:
            move()
        except PuzzleError as e:
            # placement rejections are also reported as InvalidMove events
            self._set_status(rejection_message(e), COLORS['error'])
            return
        self.selected_tile_id = None
        self._refresh_tray()
        self._refresh_board()

    def _play_sound(self, cue):
        if cue != CLICK:
            self.root.bell()

    # ------------------------------------------------------------------
    # Engine notifications
    # ------------------------------------------------------------------

    def _on_engine_event(self, event):
        engine = self.session.engine
        if isinstance(event, (Placed, Removed)):
            self._set_status(f"🧩 {engine.placed_count}/{engine.rows * engine.cols} tiles placed")
        elif isinstance(event, Reset):
            self.selected_tile_id = None
            self._refresh_tray()
            self._refresh_board()
            self._set_status("↺ Tiles shuffled back into the tray")
        elif isinstance(event, StateChanged):
            if event.state is SessionState.SOLVED:
                self._set_status("✅ Puzzle solved!", COLORS['success'])
                self._show_overlay_solved()
            elif event.state is SessionState.MISFILLED:
                self._set_status("⚠ Some tiles are in the wrong place", COLORS['error'])
                self._show_overlay_failed()

    def _make_overlay(self, text, color):
        overlay = tk.Frame(self.content, bg=COLORS['bg_dark'], highlightthickness=2,
                           highlightbackground=color)
        overlay.place(relx=0.5, rely=0.5, anchor=tk.CENTER)
        tk.Label(overlay, text=text, font=('Segoe UI', 18, 'bold'),
                 bg=color, fg='white', padx=20, pady=12).pack(padx=20, pady=(20, 10))
        return overlay

    def _show_overlay_solved(self):
        overlay = self._make_overlay("🎉 Well done! The photo is complete!", COLORS['bg_light'])
        ttk.Button(overlay, text="Close", style='Secondary.TButton',
                   command=overlay.destroy).pack(pady=5)
        ttk.Button(overlay, text="Choose a new photo", style='Game.TButton',
                   command=self._choose_new_photo).pack(pady=(5, 20))

    def _show_overlay_failed(self):
        overlay = self._make_overlay("⚠ The puzzle is put together wrong!", COLORS['accent'])

        def try_again():
            overlay.destroy()
            self.session.retry()

        ttk.Button(overlay, text="Try again", style='Game.TButton',
                   command=try_again).pack(pady=(5, 20))

    def _choose_new_photo(self):
        self._end_session()
        self._clear_content()
        self.placeholder = tk.Label(self.content, text="Your puzzle will appear here",
                                    font=('Segoe UI', 11), bg=COLORS['bg_medium'],
                                    fg=COLORS['text_dim'])
        self.placeholder.pack(expand=True)
        self.file_label.config(text="No photo selected")
        self._set_status("Choose a photo to begin!")
        self._select_image()

    def _on_close(self):
        self._end_session()
        self.root.destroy()


def main():
    root = tk.Tk()
    app = PhotoPuzzleGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
