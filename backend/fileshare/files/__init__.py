"""File sharing module for Fileshare.

This module handles uploads, short-id registration, share-page previews and
downloads. Files are stored flat on local disk as ``{id}{ext}``; the id
registry is held in process memory and is lost on restart.

Previewed inline:
- Video: mp4, webm, ogg
- Images: png, jpg, jpeg, gif, bmp, webp, svg
- Text: txt, md, html, css, js, json, csv
- Audio: mp3, wav, m4a

Everything else is offered as a download only.
"""
