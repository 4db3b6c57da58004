import customtkinter as ctk
from tkinter import filedialog, messagebox
from PIL import Image, ImageTk
from PIL.Image import DecompressionBombError
import os

# Import core logic
from core.catalog_parser import load_catalog
from core.errors import StitchError
from core.renderer import GRID_STYLES, STYLE_FLAGS, load_symbol_font, render_grid
from core.session import PatternSession
from core.settings import SETTINGS_FILENAME, AppSettings
from ui.components import IntSpinbox, LegendTable


class StitchApp(ctk.CTk):
    def __init__(self):
        super().__init__()

        # --- Initialization ---
        current_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.dirname(current_dir)
        self.settings = AppSettings.load(os.path.join(project_root, SETTINGS_FILENAME))
        self.output_dir = os.path.join(project_root, self.settings.output_dir)

        # Window Setup
        self.title("Cross Stitch Image Generator")
        self.geometry("1400x800")
        self.resizable(True, True)
        self.minsize(1000, 600)

        # State
        catalog = []
        try:
            catalog = load_catalog(self.settings.catalog_path)
        except (StitchError, OSError) as e:
            print(f"Error loading thread catalog: {e}")
            messagebox.showerror("Thread catalog", f"Failed to load thread colors: {e}")
        self.session = PatternSession(catalog)
        self.symbol_font = load_symbol_font(self.settings.font_path, size=self.settings.cell_size)
        self.current_grid = None
        self.preview_image = None
        self.tk_preview = None
        self.canvas_image_id = None

        # --- Layout Configuration ---
        self.grid_columnconfigure(0, weight=0, minsize=300)
        self.grid_columnconfigure(1, weight=1)
        self.grid_columnconfigure(2, weight=0, minsize=520)
        self.grid_rowconfigure(0, weight=1)

        # 1. Sidebar
        self.sidebar = ctk.CTkFrame(self, width=300, corner_radius=0)
        self.sidebar.grid(row=0, column=0, sticky="nsew")

        self.logo_label = ctk.CTkLabel(self.sidebar, text="Stitch Crafter", font=ctk.CTkFont(size=26, weight="bold"))
        self.logo_label.pack(pady=(20, 10), padx=20)

        self.hint_label = ctk.CTkLabel(self.sidebar, text="Select an image to upload:", anchor="w")
        self.hint_label.pack(pady=(5, 0), padx=20, fill="x")

        # Params: Height
        height_header = ctk.CTkFrame(self.sidebar, fg_color="transparent")
        height_header.pack(fill="x", padx=20, pady=(15, 0))
        ctk.CTkLabel(height_header, text="Height", anchor="w", width=80).pack(side="left")
        self.height_spin = IntSpinbox(height_header, from_=self.settings.min_height, to=self.settings.max_height,
                                      value=self.settings.default_height, width=110,
                                      command=self.update_height_from_spinbox)
        self.height_spin.pack(side="right")
        self.slider_height = ctk.CTkSlider(self.sidebar, from_=self.settings.min_height, to=self.settings.max_height,
                                           number_of_steps=self.settings.max_height - self.settings.min_height,
                                           command=self.update_height_from_slider)
        self.slider_height.set(self.settings.default_height)
        self.slider_height.pack(pady=(2, 5), padx=20, fill="x")

        # Params: Thread Colors
        color_header = ctk.CTkFrame(self.sidebar, fg_color="transparent")
        color_header.pack(fill="x", padx=20, pady=(10, 0))
        ctk.CTkLabel(color_header, text="Thread Colors", anchor="w", width=80).pack(side="left")
        self.color_spin = IntSpinbox(color_header, from_=self.settings.min_colors, to=self.settings.max_colors,
                                     value=self.settings.default_num_colors, width=110,
                                     command=self.update_colors_from_spinbox)
        self.color_spin.pack(side="right")
        self.slider_colors = ctk.CTkSlider(self.sidebar, from_=self.settings.min_colors, to=self.settings.max_colors,
                                           number_of_steps=self.settings.max_colors - self.settings.min_colors,
                                           command=self.update_colors_from_slider)
        self.slider_colors.set(self.settings.default_num_colors)
        self.slider_colors.pack(pady=(2, 5), padx=20, fill="x")

        # Params: Grid Style
        ctk.CTkLabel(self.sidebar, text="Grid Style", anchor="w").pack(pady=(10, 0), padx=20, fill="x")
        self.style_var = ctk.StringVar(value=self.settings.grid_style)
        for style in GRID_STYLES:
            ctk.CTkRadioButton(self.sidebar, text=style, variable=self.style_var, value=style,
                               command=self.on_style_change).pack(pady=3, padx=30, anchor="w")

        # Actions
        self.btn_upload = ctk.CTkButton(self.sidebar, text="Select Image", command=self.open_image)
        self.btn_upload.pack(pady=(20, 5), padx=20, fill="x")

        self.btn_resize = ctk.CTkButton(self.sidebar, text="Resize Image", command=self.resize_image)
        self.btn_resize.pack(pady=5, padx=20, fill="x")

        self.btn_generate = ctk.CTkButton(self.sidebar, text="Generate", command=self.generate_pattern,
                                          height=45, font=("Arial", 16, "bold"))
        self.btn_generate.pack(pady=5, padx=20, fill="x")

        self.btn_export = ctk.CTkButton(self.sidebar, text="Export Pattern", command=self.export_pattern,
                                        state="disabled", fg_color="#519a73", hover_color="#45835f")
        self.btn_export.pack(pady=5, padx=20, fill="x")

        self.status_label = ctk.CTkLabel(self.sidebar, text="", text_color="#2ecc71")
        self.status_label.pack(side="bottom", pady=10)

        # 2. Pattern preview
        self.preview_frame = ctk.CTkFrame(self, corner_radius=0, fg_color="transparent")
        self.preview_frame.grid(row=0, column=1, sticky="nsew", padx=10, pady=10)
        self.preview_canvas = ctk.CTkCanvas(self.preview_frame, bg="#1a1a1a", highlightthickness=0)
        self.preview_canvas.pack(fill="both", expand=True)
        self.preview_canvas.bind("<Configure>", self.on_resize)

        # 3. Legend
        self.legend = LegendTable(self, label_text="Legend", width=500)
        self.legend.grid(row=0, column=2, sticky="nsew", padx=(0, 10), pady=10)

    # --- Parameter sync ---
    def update_height_from_slider(self, value):
        self.height_spin.set(int(value))

    def update_height_from_spinbox(self):
        v = self.height_spin.get()
        if v is not None:
            v = self.settings.clamp_height(v)
            self.height_spin.set(v)
            self.slider_height.set(v)

    def update_colors_from_slider(self, value):
        self.color_spin.set(int(value))

    def update_colors_from_spinbox(self):
        v = self.color_spin.get()
        if v is not None:
            v = self.settings.clamp_num_colors(v)
            self.color_spin.set(v)
            self.slider_colors.set(v)

    def current_height(self):
        return self.settings.clamp_height(self.slider_height.get())

    def current_num_colors(self):
        return self.settings.clamp_num_colors(self.slider_colors.get())

    # --- Actions ---
    def open_image(self):
        f = filedialog.askopenfilename(parent=self, filetypes=[("Image", "*.png *.jpg *.jpeg")])
        if not f:
            return
        try:
            self.session.open_image(f)
        except DecompressionBombError:
            messagebox.showerror("Error", "Image too large.")
            return
        except (StitchError, OSError) as e:
            messagebox.showerror("Error", f"Failed to load image: {e}")
            return
        print(f"Selected file: {f}")
        self.btn_export.configure(state="disabled")
        self.legend.update_rows([])
        self.resize_image()

    def resize_image(self):
        try:
            self.current_grid = self.session.preview(self.current_height())
        except StitchError as e:
            messagebox.showerror("Error", str(e))
            return
        self.render_current_grid()

    def generate_pattern(self):
        if not self.session.catalog:
            messagebox.showerror("Error", "Failed to load thread colors")
            return
        self.status_label.configure(text="Generating...")
        self.update_idletasks()
        try:
            result = self.session.generate(self.current_height(), self.current_num_colors(),
                                           strategy=self.settings.summary_strategy)
            self.current_grid = result.grid
            self.render_current_grid()
            self.legend.update_rows(self.session.legend())
            self.btn_export.configure(state="normal")
        except StitchError as e:
            messagebox.showerror("Error", str(e))
        finally:
            self.status_label.configure(text="")

    def export_pattern(self):
        try:
            paths = self.session.export(self.output_dir, cell_size=self.settings.cell_size, font=self.symbol_font)
        except (StitchError, OSError) as e:
            print(f"Error exporting pattern: {e}")
            messagebox.showerror("Error", f"Failed to save pattern: {e}")
            return
        messagebox.showinfo("Success", "Pattern saved to:\n" + "\n".join(paths))

    def on_style_change(self):
        if self.current_grid:
            self.render_current_grid()

    # --- Display ---
    def render_current_grid(self):
        show_symbol, use_stitch = STYLE_FLAGS[self.style_var.get()]
        # Raw previews carry no symbols
        if self.current_grid and self.current_grid[0] and self.current_grid[0][0].is_placeholder:
            show_symbol = False
        self.preview_image = render_grid(self.current_grid, self.settings.cell_size,
                                         show_symbol=show_symbol, use_stitch=use_stitch, font=self.symbol_font)
        self.display_image()

    def display_image(self):
        if not self.preview_image:
            return
        cw, ch = self.preview_canvas.winfo_width(), self.preview_canvas.winfo_height()
        if cw <= 1:
            cw, ch = 800, 600
        iw, ih = self.preview_image.size
        zoom = min(cw / iw, ch / ih, 1.0)
        nw, nh = max(1, int(iw * zoom)), max(1, int(ih * zoom))

        disp = self.preview_image.resize((nw, nh), Image.LANCZOS) if zoom < 1.0 else self.preview_image
        self.tk_preview = ImageTk.PhotoImage(disp)
        if self.canvas_image_id:
            self.preview_canvas.delete(self.canvas_image_id)
        self.canvas_image_id = self.preview_canvas.create_image(cw // 2, ch // 2, image=self.tk_preview, anchor="center")

    def on_resize(self, event):
        if self.preview_image:
            self.display_image()
