"""
Core application engine.

`enrich` merges resolved asset URLs into photo derivatives, and the
`DownloadManager` coordinates downloading every photo of a fetched album,
delegating each file to the `PhotoDownloader`.
"""
