"""Order reminder reconciliation (reconciler core, Celery trigger, HTTP trigger).

A tick scans the ``reminder_schedule`` collection for due reminder chains,
cancels chains whose originating order notification has been read, and
otherwise sends the next follow-up and reschedules or stops the chain.
"""
