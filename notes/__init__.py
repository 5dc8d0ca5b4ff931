"""
Notes App

Read-only listing of study notes (subject, title, download link, size).
Notes are added out-of-band with the `add_note` management command.
"""
