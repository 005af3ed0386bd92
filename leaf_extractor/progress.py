import tkinter as tk
from tkinter import messagebox


class TkProgressWindow:
    """
    A small window showing which leaf is being exported. The export runs on
    the same thread, so the window is redrawn every time the status changes.
    """

    def __init__(self, title="Leaf extractor"):
        self.root = tk.Tk()
        self.root.title(title)
        self.root.resizable(False, False)
        self.status = tk.StringVar(master=self.root, value="Starting")
        tk.Label(self.root, textvariable=self.status, width=60, anchor="w").pack(padx=20, pady=20)
        self.root.update()

    def set_status(self, text):
        self.status.set(text)
        self.root.update()

    def alert(self, text):
        messagebox.showerror("Leaf extractor", text, parent=self.root)

    def close(self):
        self.root.destroy()
