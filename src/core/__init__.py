"""Core domain package for spamscope.

Core contains the lexicon, classifier, notification policy and pipeline
orchestration without any HTTP, SMTP or storage-specific code, keeping the
business logic portable.
"""
