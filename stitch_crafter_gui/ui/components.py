import customtkinter as ctk


class IntSpinbox(ctk.CTkFrame):
    def __init__(self, *args, width=100, height=32, step_size=1, from_=0, to=256, value=None, command=None, **kwargs):
        super().__init__(*args, width=width, height=height, **kwargs)

        self.step_size = step_size
        self.from_ = from_
        self.to = to
        self.command = command

        self.grid_columnconfigure((0, 2), weight=0)
        self.grid_columnconfigure(1, weight=1)

        self.subtract_button = ctk.CTkButton(self, text="-", width=height-6, height=height-6,
                                               command=self.subtract_button_callback)
        self.subtract_button.grid(row=0, column=0, padx=(3, 0), pady=3)

        self.entry = ctk.CTkEntry(self, width=width-(2*height), height=height-6, border_width=0)
        self.entry.grid(row=0, column=1, columnspan=1, padx=3, pady=3, sticky="ew")
        self.entry.bind("<Return>", lambda _e: self._commit())
        self.entry.bind("<FocusOut>", lambda _e: self._commit())

        self.add_button = ctk.CTkButton(self, text="+", width=height-6, height=height-6,
                                          command=self.add_button_callback)
        self.add_button.grid(row=0, column=2, padx=(0, 3), pady=3)

        self.set(value if value is not None else from_)

    def add_button_callback(self):
        self._step(self.step_size)

    def subtract_button_callback(self):
        self._step(-self.step_size)

    def _step(self, delta):
        value = self.get()
        if value is None:
            return
        value += delta
        if self.from_ <= value <= self.to:
            self.set(value)
            if self.command is not None:
                self.command()

    def _commit(self):
        value = self.get()
        if value is None:
            return
        self.set(max(self.from_, min(self.to, value)))
        if self.command is not None:
            self.command()

    def get(self):
        try:
            return int(self.entry.get())
        except ValueError:
            return None

    def set(self, value):
        self.entry.delete(0, "end")
        self.entry.insert(0, str(value))


class LegendTable(ctk.CTkScrollableFrame):
    """
    Thread legend: symbol, DMC number, name, stitch count and a color swatch
    for every thread of the working palette.
    """
    HEADERS = ("Symbol", "Number", "Name", "Stitches", "Color")
    COLUMN_WIDTHS = (60, 90, 220, 70, 40)

    def __init__(self, parent, **kwargs):
        super().__init__(parent, **kwargs)
        for col, width in enumerate(self.COLUMN_WIDTHS):
            self.grid_columnconfigure(col, minsize=width)
        self._row_widgets = []
        for col, title in enumerate(self.HEADERS):
            ctk.CTkLabel(self, text=title, font=("Arial", 12, "bold"), anchor="w").grid(
                row=0, column=col, padx=4, pady=(0, 4), sticky="w")

    def update_rows(self, rows):
        """rows: dicts as produced by core.grid.legend_rows."""
        for widget in self._row_widgets:
            widget.destroy()
        self._row_widgets = []

        for r, row in enumerate(rows, start=1):
            cells = [
                ctk.CTkLabel(self, text=row["symbol"], font=("DejaVu Sans", 16), anchor="w"),
                ctk.CTkLabel(self, text=row["number"], anchor="w"),
                ctk.CTkLabel(self, text=row["name"], anchor="w"),
                ctk.CTkLabel(self, text=str(row["stitches"]), anchor="e"),
                ctk.CTkLabel(self, text="", width=20, height=20, corner_radius=4, fg_color=row["hex"]),
            ]
            for col, widget in enumerate(cells):
                widget.grid(row=r, column=col, padx=4, pady=1, sticky="w")
            self._row_widgets.extend(cells)
