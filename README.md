# miniyeska

A small POSIX-style command shell written in Python, for POSIX systems.

It reads command lines and runs them. It supports:

- simple commands, looked up on `PATH` or given by a path that holds `/`
- pipelines: `ls | grep py | wc -l`
- lists with `&&` and `||`
- subshells in parentheses: `(ls && ls /tmp) > listing.txt`
- redirections: `<`, `>`, `>>` (output files are created with mode 0644),
  and here-documents with `<<`
- single and double quotes
- parameter expansion: `$NAME` and `$?`; unquoted values are split on blanks
- `*` wildcards matched against names in the current directory, sorted.
  Hidden names match only a pattern that starts with a dot. A pattern that
  holds a `/` (other than a leading `./`) or matches nothing is left as it is.

Errors are reported on standard error with the prefix `minishell:`. A syntax
error or an unclosed quote sets the status to 2. A command that cannot be
found sets it to 127. A redirection that cannot be opened or that expands
ambiguously sets it to 1. A command killed by a signal gives 128 plus the
signal number.

## Installing

```
pip install .
```

## Running

```
miniyeska
```

When standard input is a terminal, the shell prints `Welcome to MiniYeska!`
and prompts with `MiniYeska$ `. It leaves on end of input (Ctrl-D) and
prints `exit` to standard error. Ctrl-C drops the current line and sets the
last status to 130. Ctrl-\ is ignored at the prompt.

Commands can also be piped in. The shell then runs without a prompt:

```
printf 'echo hello | tr a-z A-Z\n' | miniyeska
```

The exit status of `miniyeska` is the status of the last command it ran.
The shell takes no arguments. If any are given, it prints a usage message
and exits with status 2.

## Using it from Python

```python
from miniyeska.repl import Shell

shell = Shell(environ={"PATH": "/usr/bin:/bin"}, interactive=False)
shell.evaluate("true && echo ok > out.txt")
print(shell.last_status)
```

`Shell.evaluate(line)` runs one line and returns whether the shell should
stop. `Shell.run(stdin)` reads lines from a text stream until end of input
and returns the last status. Here-documents are read from the same stream.

Commands that run inside the shell process can be added through
`shell.executor.builtins`. This dict maps a command name to a callable
`builtin(executor, argv, out)`. The callable writes to the text stream
`out` and returns a status. Setting `executor.finished` makes
`Shell.evaluate` report that the shell should stop.

```python
def greet(executor, argv, out):
    out.write("hello " + " ".join(argv[1:]) + "\n")
    return 0

shell.executor.builtins["greet"] = greet
shell.evaluate("greet world")
```

The building blocks can also be used on their own:

- `miniyeska.lexer.tokenize` splits a line into tokens.
- `miniyeska.parser.parse` builds a tree of `Command`, `Subshell` and
  `Operator` nodes and calls back for each here-document.
- `miniyeska.expansion.expand_word` expands one token into fields.
- `miniyeska.wildcards.wildcard_match` and
  `miniyeska.wildcards.expand_wildcards` do pathname matching.
- `miniyeska.cmdpath.resolve_cmd_path` searches `PATH`.
- `miniyeska.env.init_environment` and `miniyeska.env.Environment` hold the
  variables.
- `miniyeska.executor.Executor` runs a tree.

## What it does not do

- It has no built-in commands. `echo`, `pwd` and `env` work only as the
  programs of those names found on `PATH`. `cd`, `export`, `unset` and `exit`
  cannot change the shell's directory, variables or state unless you
  register builtins for them yourself.
- There is no line history or line editing at the prompt.
- There are no variable assignments, `${...}` forms, backslash escapes,
  job control, background jobs or `;` separators.

## Running the tests

```
pip install ".[test]"
pytest
```