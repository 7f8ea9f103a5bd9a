"""clean_text

Streaming UTF-8 text normalization: line terminators, trailing whitespace,
empty lines, final newline, case-insensitive line/paragraph sorting.

Public API surface:
- clean_text.cli.main : CLI entrypoint (stdin -> stdout)
- clean_text.cli.batch_main : batch CLI entrypoint (YAML job file)
- clean_text.sources.runes.read_runes : byte source -> rune Stream
- clean_text.stages.registry.make_catalog / make_stages : named transformers
- clean_text.pipeline.chain.Chain : compose stages
- clean_text.pipeline.build.process_stream / process_file / build_batch : run pipelines

Every stage maps a Stream to a Stream; stages can be added without touching
pipeline code.
"""
__all__ = ["__version__"]
__version__ = "0.1.0"
