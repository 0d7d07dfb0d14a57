"""
Word Replacer - Desktop Tool
Finds and replaces text in every Word document of a folder
"""

import tkinter as tk
from tkinter import ttk, filedialog, messagebox, scrolledtext
import os
import logging
import threading
import subprocess
import platform
from typing import Any, Dict, List

from document_scanner import DocumentScanner
from replacement_runner import ReplacementRunner, resolve_engine
from replacer_errors import WordAutomationError
from request_validator import ENGINES, RequestValidator
from run_logging import setup_logging
from settings_loader import SettingsLoader, find_config_file

# Console only; per-run log files are created when a run starts
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


def open_path(path: str):
    """Open a file or folder with the default system application"""
    system = platform.system()
    if system == 'Windows':
        os.startfile(path)
    elif system == 'Darwin':  # macOS
        subprocess.run(['open', path])
    else:  # Linux and other Unix-like systems
        subprocess.run(['xdg-open', path])


class WordReplacerApp:
    def __init__(self, root):
        self.root = root
        self.root.title("Word Replacer - Bulk Find and Replace for Word Documents")
        self.root.geometry("1100x780")

        # Initialize components
        self.settings_loader = SettingsLoader()
        self.validator = RequestValidator()
        self.scanner = DocumentScanner()

        # Data storage
        self.folder = None
        self.files_list = []  # Documents found in the selected folder
        self.pairs: List[Dict[str, str]] = []  # Replacement pairs in application order
        self.run_results = {}
        self.current_log_files = {}  # Set when a run starts
        self.cancel_event = None
        self.logs_dir = "logs"

        self.create_widgets()
        self.auto_load_config()

    def create_widgets(self):
        # Main container
        main_frame = ttk.Frame(self.root, padding="10")
        main_frame.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)
        main_frame.columnconfigure(0, weight=1)
        main_frame.columnconfigure(1, weight=1)
        main_frame.rowconfigure(3, weight=1)

        title_label = ttk.Label(main_frame, text="Word Replacer",
                                font=("Arial", 16, "bold"))
        title_label.grid(row=0, column=0, columnspan=2, pady=(0, 15))

        # Folder Section
        folder_frame = ttk.LabelFrame(main_frame, text="Documents Folder", padding="10")
        folder_frame.grid(row=1, column=0, columnspan=2, sticky=(tk.W, tk.E), pady=5)
        folder_frame.columnconfigure(1, weight=1)

        ttk.Label(folder_frame, text="Folder:").grid(row=0, column=0, sticky=tk.W, padx=5, pady=5)
        self.folder_var = tk.StringVar()
        ttk.Entry(folder_frame, textvariable=self.folder_var, state="readonly").grid(
            row=0, column=1, sticky=(tk.W, tk.E), padx=5, pady=5)
        ttk.Button(folder_frame, text="Browse Folder",
                   command=self.browse_folder).grid(row=0, column=2, padx=5, pady=5)

        ttk.Label(folder_frame, text="Status:").grid(row=1, column=0, sticky=tk.W, padx=5, pady=5)
        self.folder_status_var = tk.StringVar(value="Please select a folder with Word documents")
        ttk.Label(folder_frame, textvariable=self.folder_status_var,
                  foreground="blue").grid(row=1, column=1, sticky=tk.W, padx=5, pady=5)

        # Replacement Pairs Section
        pairs_frame = ttk.LabelFrame(main_frame, text="Find and Replace", padding="10")
        pairs_frame.grid(row=2, column=0, sticky=(tk.W, tk.E, tk.N, tk.S), pady=5, padx=(0, 5))
        pairs_frame.columnconfigure(1, weight=1)

        ttk.Label(pairs_frame, text="Find:").grid(row=0, column=0, sticky=tk.W, padx=5, pady=5)
        self.find_var = tk.StringVar()
        ttk.Entry(pairs_frame, textvariable=self.find_var).grid(row=0, column=1, sticky=(tk.W, tk.E), padx=5, pady=5)

        ttk.Label(pairs_frame, text="Replace with:").grid(row=1, column=0, sticky=tk.W, padx=5, pady=5)
        self.replace_var = tk.StringVar()
        ttk.Entry(pairs_frame, textvariable=self.replace_var).grid(row=1, column=1, sticky=(tk.W, tk.E), padx=5, pady=5)

        pair_buttons = ttk.Frame(pairs_frame)
        pair_buttons.grid(row=2, column=0, columnspan=2, sticky=tk.W, pady=5)
        ttk.Button(pair_buttons, text="Add Pair", command=self.add_pair).pack(side=tk.LEFT, padx=5)
        ttk.Button(pair_buttons, text="Remove Selected", command=self.remove_selected_pairs).pack(side=tk.LEFT, padx=5)
        ttk.Button(pair_buttons, text="Load Pairs File", command=self.load_pairs_file).pack(side=tk.LEFT, padx=5)

        self.pairs_tree = ttk.Treeview(pairs_frame, columns=("Find", "Replace"), show="headings", height=5)
        self.pairs_tree.heading("Find", text="Find")
        self.pairs_tree.heading("Replace", text="Replace with")
        self.pairs_tree.column("Find", width=200)
        self.pairs_tree.column("Replace", width=200)
        self.pairs_tree.grid(row=3, column=0, columnspan=2, sticky=(tk.W, tk.E), padx=5, pady=5)

        # Options Section
        options_frame = ttk.LabelFrame(main_frame, text="Options", padding="10")
        options_frame.grid(row=2, column=1, sticky=(tk.W, tk.E, tk.N, tk.S), pady=5, padx=(5, 0))

        self.match_case_var = tk.BooleanVar(value=False)
        self.whole_word_var = tk.BooleanVar(value=False)
        self.recursive_var = tk.BooleanVar(value=True)
        self.include_headers_var = tk.BooleanVar(value=True)
        self.dry_run_var = tk.BooleanVar(value=False)
        self.backup_var = tk.BooleanVar(value=True)
        self.visible_var = tk.BooleanVar(value=False)

        options = [
            ("Match case", self.match_case_var),
            ("Whole words only", self.whole_word_var),
            ("Include subfolders", self.recursive_var),
            ("Include headers, footers and text boxes", self.include_headers_var),
            ("Dry run (count matches, do not save)", self.dry_run_var),
            ("Back up documents before changing them", self.backup_var),
            ("Show Word window", self.visible_var),
        ]
        for row, (label, variable) in enumerate(options):
            ttk.Checkbutton(options_frame, text=label, variable=variable).grid(
                row=row, column=0, columnspan=2, sticky=tk.W, padx=5, pady=2)

        ttk.Label(options_frame, text="Engine:").grid(row=len(options), column=0, sticky=tk.W, padx=5, pady=5)
        self.engine_var = tk.StringVar(value="auto")
        self.engine_combo = ttk.Combobox(options_frame, textvariable=self.engine_var,
                                         values=ENGINES, state="readonly", width=10)
        self.engine_combo.grid(row=len(options), column=1, sticky=tk.W, padx=5, pady=5)

        # Results Section
        results_frame = ttk.LabelFrame(main_frame, text="Results", padding="10")
        results_frame.grid(row=3, column=0, columnspan=2, sticky=(tk.W, tk.E, tk.N, tk.S), pady=10)
        results_frame.columnconfigure(0, weight=1)
        results_frame.rowconfigure(0, weight=1)

        self.notebook = ttk.Notebook(results_frame)
        self.notebook.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))

        documents_frame = ttk.Frame(self.notebook)
        self.notebook.add(documents_frame, text="Documents")

        tree_frame = ttk.Frame(documents_frame)
        tree_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        tree_scroll_y = ttk.Scrollbar(tree_frame, orient=tk.VERTICAL)
        tree_scroll_y.pack(side=tk.RIGHT, fill=tk.Y)
        tree_scroll_x = ttk.Scrollbar(tree_frame, orient=tk.HORIZONTAL)
        tree_scroll_x.pack(side=tk.BOTTOM, fill=tk.X)

        self.results_tree = ttk.Treeview(tree_frame,
                                         columns=("Status", "Replacements", "Error"),
                                         show="tree headings",
                                         yscrollcommand=tree_scroll_y.set,
                                         xscrollcommand=tree_scroll_x.set)
        self.results_tree.heading("#0", text="Document")
        self.results_tree.heading("Status", text="Status")
        self.results_tree.heading("Replacements", text="Replacements")
        self.results_tree.heading("Error", text="Error")
        self.results_tree.column("#0", width=380)
        self.results_tree.column("Status", width=90)
        self.results_tree.column("Replacements", width=100)
        self.results_tree.column("Error", width=400)
        self.results_tree.pack(fill=tk.BOTH, expand=True)

        tree_scroll_y.config(command=self.results_tree.yview)
        tree_scroll_x.config(command=self.results_tree.xview)

        self.results_tree.tag_configure('changed', background='#d4edda')
        self.results_tree.tag_configure('failed', background='#f8d7da')
        self.results_tree.tag_configure('skipped', background='#fff3cd')

        summary_frame = ttk.Frame(self.notebook)
        self.notebook.add(summary_frame, text="Summary")

        self.summary_text = scrolledtext.ScrolledText(summary_frame, wrap=tk.WORD, height=15)
        self.summary_text.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        # Progress Section
        progress_frame = ttk.LabelFrame(main_frame, text="Processing Status", padding="10")
        progress_frame.grid(row=4, column=0, columnspan=2, sticky=(tk.W, tk.E), pady=5)
        progress_frame.columnconfigure(1, weight=1)

        ttk.Label(progress_frame, text="Status:").grid(row=0, column=0, sticky=tk.W, padx=5, pady=5)
        self.progress_status_var = tk.StringVar(value="Ready")
        ttk.Label(progress_frame, textvariable=self.progress_status_var,
                  foreground="blue", font=("Arial", 9)).grid(row=0, column=1, sticky=tk.W, padx=5, pady=5)

        self.progress_bar = ttk.Progressbar(progress_frame, mode='determinate', length=400)
        self.progress_bar.grid(row=1, column=0, columnspan=2, sticky=(tk.W, tk.E), padx=5, pady=5)
        self.progress_bar.grid_remove()

        # Action Buttons
        button_frame = ttk.Frame(main_frame)
        button_frame.grid(row=5, column=0, columnspan=2, pady=10)

        self.start_button = ttk.Button(button_frame, text="Start Replacement",
                                       command=self.start_replacement)
        self.start_button.pack(side=tk.LEFT, padx=5)

        self.cancel_button = ttk.Button(button_frame, text="Cancel",
                                        command=self.cancel_replacement, state=tk.DISABLED)
        self.cancel_button.pack(side=tk.LEFT, padx=5)

        self.export_button = ttk.Button(button_frame, text="Export Report",
                                        command=self.export_report)
        self.export_button.pack(side=tk.LEFT, padx=5)

        self.view_logs_button = ttk.Button(button_frame, text="View Logs",
                                           command=self.show_log_menu)
        self.view_logs_button.pack(side=tk.LEFT, padx=5)

        self.clear_button = ttk.Button(button_frame, text="Clear All",
                                       command=self.clear_all)
        self.clear_button.pack(side=tk.LEFT, padx=5)

        self.is_processing = False

    def auto_load_config(self):
        """Load default options from replacer_config.py on startup"""
        try:
            config_file = find_config_file()
            if config_file:
                self.settings_loader.load_from_config_file(config_file)
                logger.info(f"Loaded settings from {config_file}")
            else:
                logger.info("replacer_config.py not found, using built-in defaults")

            settings = self.settings_loader.get_all()
            self.scanner = DocumentScanner(settings['extensions'], settings['backup_dir_name'])
            self.logs_dir = settings.get('logs_dir', 'logs')

            self.match_case_var.set(bool(settings['match_case']))
            self.whole_word_var.set(bool(settings['whole_word']))
            self.recursive_var.set(bool(settings['recursive']))
            self.include_headers_var.set(bool(settings['include_headers']))
            self.visible_var.set(bool(settings['visible']))
            if settings['engine'] in ENGINES:
                self.engine_var.set(settings['engine'])

            engine = resolve_engine(self.engine_var.get())
            self.progress_status_var.set(f"Ready (engine: {engine})")

        except Exception as e:
            error_msg = f"Failed to load config: {str(e)}"
            self.progress_status_var.set(error_msg)
            logger.error(error_msg)
            messagebox.showerror("Error Loading Config", error_msg)

    def browse_folder(self):
        """Browse for the folder containing the documents (includes subfolders)"""
        folder = filedialog.askdirectory(title="Select Folder with Word Documents")
        if not folder:
            return
        try:
            files = self.scanner.scan(folder, recursive=self.recursive_var.get())

            if not files:
                messagebox.showwarning("No Documents",
                                       f"No Word documents found in {folder}"
                                       f"{' or its subfolders' if self.recursive_var.get() else ''}")
                return

            location_info = self.scanner.describe(files, folder)

            threshold = self.settings_loader.get('large_batch_threshold', 100)
            if len(files) > threshold:
                response = messagebox.askyesno(
                    "Confirm Large Folder",
                    f"Found {len(files)} documents ({location_info}).\n"
                    f"Processing may take a while. Continue?"
                )
                if not response:
                    return

            self.folder = folder
            self.files_list = files
            self.folder_var.set(folder)
            self.folder_status_var.set(f"{len(files)} documents ({location_info})")

            logger.info(f"Selected folder with {len(files)} documents ({location_info}): {folder}")

        except OSError as e:
            messagebox.showerror("Error", f"Failed to select folder: {str(e)}")
            logger.error(f"Folder selection error: {str(e)}")

    def add_pair(self):
        """Add the Find/Replace entries as a new pair"""
        find_text = self.find_var.get()
        replace_text = self.replace_var.get()
        if not find_text:
            messagebox.showerror("Error", "Please enter the text to find")
            return
        self.pairs.append({'find': find_text, 'replace': replace_text})
        self._refresh_pairs_tree()
        self.find_var.set("")
        self.replace_var.set("")

    def remove_selected_pairs(self):
        selected = self.pairs_tree.selection()
        if not selected:
            return
        indexes = sorted((self.pairs_tree.index(item) for item in selected), reverse=True)
        for index in indexes:
            del self.pairs[index]
        self._refresh_pairs_tree()

    def load_pairs_file(self):
        """Load replacement pairs from a JSON file"""
        file_path = filedialog.askopenfilename(
            title="Select Replacement Pairs File",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")]
        )
        if not file_path:
            return
        try:
            pairs = self.validator.load_pairs_file(file_path)
        except ValueError as e:
            messagebox.showerror("Invalid Pairs File", str(e))
            return
        self.pairs.extend(pairs)
        self._refresh_pairs_tree()
        messagebox.showinfo("Pairs Loaded", f"Loaded {len(pairs)} pairs from {os.path.basename(file_path)}")

    def _refresh_pairs_tree(self):
        for item in self.pairs_tree.get_children():
            self.pairs_tree.delete(item)
        for pair in self.pairs:
            self.pairs_tree.insert("", tk.END, values=(pair['find'], pair['replace']))

    def build_request(self) -> Dict[str, Any]:
        """Collect the form into a replacement request"""
        pairs = list(self.pairs)
        # Text still in the entries counts as a pair, so a single replacement needs no "Add Pair"
        if self.find_var.get():
            pairs.append({'find': self.find_var.get(), 'replace': self.replace_var.get()})
        return {
            'folder': self.folder or '',
            'pairs': pairs,
            'match_case': self.match_case_var.get(),
            'whole_word': self.whole_word_var.get(),
            'recursive': self.recursive_var.get(),
            'include_headers': self.include_headers_var.get(),
            'dry_run': self.dry_run_var.get(),
            'backup': self.backup_var.get(),
            'visible': self.visible_var.get(),
            'engine': self.engine_var.get(),
        }

    def set_processing_state(self, is_processing: bool):
        """Enable/disable UI elements during processing"""
        self.is_processing = is_processing
        state = tk.DISABLED if is_processing else tk.NORMAL

        self.start_button.config(state=state)
        self.export_button.config(state=state)
        self.clear_button.config(state=state)
        self.engine_combo.config(state=tk.DISABLED if is_processing else "readonly")
        # View Logs stays available during processing
        self.cancel_button.config(state=tk.NORMAL if is_processing else tk.DISABLED)

        if is_processing:
            self.progress_bar.grid()
            self.progress_status_var.set("Processing... Please wait")
        else:
            self.progress_bar.grid_remove()
            self.progress_bar['value'] = 0

    def update_progress(self, current: int, total: int, message: str = ""):
        """Update progress bar and status (thread-safe)"""
        self.root.after(0, self._update_progress_ui, current, total, message)

    def _update_progress_ui(self, current: int, total: int, message: str = ""):
        """Internal method to update UI (runs on main thread)"""
        if total > 0:
            percentage = (current / total) * 100
            self.progress_bar['value'] = current
            self.progress_bar['maximum'] = total
            status_msg = f"Processing: {current}/{total} documents ({percentage:.1f}%)"
            if message:
                status_msg += f" - {message}"
            self.progress_status_var.set(status_msg)
        else:
            self.progress_status_var.set(message if message else "Processing...")

    def start_replacement(self):
        """Validate the form and start the run in a background thread"""
        if self.is_processing:
            messagebox.showwarning("Processing", "A replacement run is already in progress. Please wait.")
            return

        try:
            settings = self.settings_loader.get_all()
            request = self.validator.normalize_request(self.build_request(), settings)
            engine = resolve_engine(request['engine'])
            validation = self.validator.validate_request(request, engine)

            if not validation['valid']:
                messagebox.showerror("Cannot Start", "\n".join(validation['errors']))
                return

            confirm_lines = []
            if validation['warnings']:
                confirm_lines.append("Warnings:")
                confirm_lines.extend(f"  - {warning}" for warning in validation['warnings'])
                confirm_lines.append("")
            if request['dry_run']:
                confirm_lines.append(f"Count matches in the documents of {request['folder']}?")
            else:
                confirm_lines.append(f"Replace text in the documents of {request['folder']}?")
                if not request['backup']:
                    confirm_lines.append("Backups are OFF, changed documents cannot be restored.")
            if not messagebox.askyesno("Start Replacement", "\n".join(confirm_lines)):
                return

            self.current_log_files = setup_logging(request['folder'], self.logs_dir)
            self.cancel_event = threading.Event()

            self.set_processing_state(True)
            self.update_progress(0, len(self.files_list), "Starting...")

            thread = threading.Thread(
                target=self._process_replacement,
                args=(request, settings),
                daemon=True
            )
            thread.start()

        except Exception as e:
            self.set_processing_state(False)
            messagebox.showerror("Error", f"Failed to start replacement: {str(e)}")
            logger.error(f"Replacement start error: {str(e)}", exc_info=True)

    def _process_replacement(self, request: Dict[str, Any], settings: Dict[str, Any]):
        """Run the replacement in a background thread"""
        try:
            runner = ReplacementRunner(settings, log_writers=self.current_log_files)
            results = runner.run(request, progress_callback=self.update_progress,
                                 cancel_event=self.cancel_event)
            self.validator.generate_report(results, self.current_log_files.get('report'))
            self.root.after(0, self._display_results_complete, results)
        except (ValueError, OSError, WordAutomationError) as e:
            logger.error(f"Replacement failed: {str(e)}", exc_info=True)
            self.root.after(0, self._processing_error, str(e))
        except Exception as e:
            logger.error(f"Replacement processing error: {str(e)}", exc_info=True)
            self.root.after(0, self._processing_error, f"Unexpected error: {str(e)}")
        finally:
            self.current_log_files['replacement_writer'].close()
            self.current_log_files['error_log_writer'].close()

    def cancel_replacement(self):
        if self.cancel_event is not None and self.is_processing:
            self.cancel_event.set()
            self.progress_status_var.set("Cancelling after the current document...")

    def _display_results_complete(self, results: Dict[str, Any]):
        """Show run results (runs on main thread)"""
        self.run_results = results
        self.set_processing_state(False)

        for item in self.results_tree.get_children():
            self.results_tree.delete(item)

        for detail in results['details']:
            display_name = os.path.relpath(detail['file'], results['folder'])
            self.results_tree.insert("", tk.END, text=display_name,
                                     values=(detail['status'], detail['replacements'] or 0, detail['error'] or ""),
                                     tags=(detail['status'],))

        self.summary_text.delete(1.0, tk.END)
        self.summary_text.insert(tk.END, self.validator.generate_report(results))

        status = (f"Done: {results['changed']} changed, {results['unchanged']} unchanged, "
                  f"{results['failed']} failed")
        if results['cancelled']:
            status = "Cancelled. " + status
        self.progress_status_var.set(status)

        verb = "Matches found" if results['dry_run'] else "Replacements made"
        message = (f"Documents: {results['total_files']}\n"
                   f"Changed: {results['changed']}\n"
                   f"Unchanged: {results['unchanged']}\n"
                   f"Failed: {results['failed']}\n"
                   f"{verb}: {results['total_replacements']}")
        if results['restarts']:
            message += f"\nWord was restarted {results['restarts']} time(s)"
        if results['warnings'] and not results['details']:
            message += "\n\n" + "\n".join(results['warnings'])

        if results['failed']:
            messagebox.showwarning("Replacement Complete", message + "\n\nSee the error log for details.")
        else:
            messagebox.showinfo("Replacement Complete", message)

    def _processing_error(self, error_msg: str):
        self.set_processing_state(False)
        self.progress_status_var.set("Error")
        messagebox.showerror("Error", f"Replacement failed: {error_msg}")

    def export_report(self):
        """Save the report of the last run"""
        if not self.run_results:
            messagebox.showinfo("No Results", "No results to export. Please run a replacement first.")
            return
        filename = filedialog.asksaveasfilename(
            title="Export Report",
            defaultextension=".txt",
            filetypes=[("Text files", "*.txt"), ("All files", "*.*")]
        )
        if not filename:
            return
        try:
            self.validator.generate_report(self.run_results, filename)
            messagebox.showinfo("Success", f"Report exported to {filename}")
        except Exception as e:
            messagebox.showerror("Error", f"Failed to export report: {str(e)}")

    def clear_all(self):
        """Clear folder, pairs and results (settings stay loaded)"""
        self.folder = None
        self.files_list = []
        self.pairs = []
        self.run_results = {}
        self.folder_var.set("")
        self.folder_status_var.set("Please select a folder with Word documents")
        self.find_var.set("")
        self.replace_var.set("")
        self._refresh_pairs_tree()

        for item in self.results_tree.get_children():
            self.results_tree.delete(item)
        self.summary_text.delete(1.0, tk.END)

        self.progress_status_var.set("Ready")
        self.progress_bar['value'] = 0
        self.progress_bar.grid_remove()

    def _open_log_file(self, log_file_path: str, log_type: str = "log"):
        """Open a log file in the default text editor"""
        if not log_file_path or not os.path.exists(log_file_path):
            messagebox.showerror("Error", f"{log_type} file not found:\n{log_file_path}")
            return
        try:
            open_path(log_file_path)
            logger.info(f"Opened {log_type} file: {log_file_path}")
        except OSError as e:
            messagebox.showerror("Error",
                                 f"Failed to open {log_type} file:\n{str(e)}\n\n"
                                 f"Please manually open:\n{log_file_path}")
            logger.error(f"Failed to open {log_type} file: {str(e)}", exc_info=True)

    def show_log_menu(self):
        """Show a menu to select which log file to open"""
        menu = tk.Menu(self.root, tearoff=0)
        menu.add_command(label="Open Logs Folder", command=self.view_log_files)
        menu.add_separator()

        log_options = []
        for key, label in (('replacements', "Replacement Log"), ('report', "Run Report"), ('errors', "Error Log")):
            path = self.current_log_files.get(key)
            if path and os.path.exists(path):
                log_options.append((label, path))

        if log_options:
            for label, file_path in log_options:
                menu.add_command(label=label, command=lambda p=file_path, t=label: self._open_log_file(p, t))
        else:
            menu.add_command(label="No log files available yet", state=tk.DISABLED)

        try:
            button_x = self.view_logs_button.winfo_rootx()
            button_y = self.view_logs_button.winfo_rooty() + self.view_logs_button.winfo_height()
            menu.post(button_x, button_y)
        except tk.TclError:
            menu.post(self.root.winfo_pointerx(), self.root.winfo_pointery())

    def view_log_files(self):
        """Open the logs folder in file explorer"""
        logs_dir = os.path.abspath(self.logs_dir)
        if not os.path.exists(logs_dir):
            messagebox.showerror("Error", f"Logs directory not found:\n{logs_dir}")
            return
        try:
            open_path(logs_dir)
            logger.info(f"Opened logs directory: {logs_dir}")
        except OSError as e:
            messagebox.showerror("Error",
                                 f"Failed to open logs directory:\n{str(e)}\n\n"
                                 f"Please manually open:\n{logs_dir}")
            logger.error(f"Failed to open logs directory: {str(e)}", exc_info=True)


def main():
    root = tk.Tk()
    app = WordReplacerApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
