"""Shared pieces of the joke publisher and subscriber.

Both processes agree only on the topic name and on the payload schema, so the
value object, its wire codec and the broker wrapper live here.
"""
