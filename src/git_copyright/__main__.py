# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/__main__.py
from git_copyright.cli import app

app(prog_name="git-copyright")
