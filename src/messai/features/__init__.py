# Feature packages: extraction engine, paper quality checks and batch pipeline.
