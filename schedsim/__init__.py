"""
schedsim package.

Simulates FCFS, Shortest-Remaining-Time and Round Robin CPU scheduling over
a static process list and reports Gantt charts and waiting/turnaround
metrics for each.
"""
